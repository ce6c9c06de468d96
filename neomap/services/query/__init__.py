from .query_channel import CallbackQueryChannel, QueryChannel

__all__ = ["CallbackQueryChannel", "QueryChannel"]

from .record_ingestor import RecordIngestor

__all__ = ["RecordIngestor"]

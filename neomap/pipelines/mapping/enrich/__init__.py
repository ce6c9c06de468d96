from .entity_enricher import EntityEnricher, resolve_position

__all__ = ["EntityEnricher", "resolve_position"]

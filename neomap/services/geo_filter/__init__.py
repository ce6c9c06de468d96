"""
Geo-Filter Module
Spatial filter queries from drawn shapes and the map state they produce
"""
from .filter_service import FilterOutcome, FilterStatus, GeoFilterService
from .query_builder import GeoFilterQueryBuilder
from .shapes import (
    CircleShape,
    LatLng,
    PolygonShape,
    PolylineShape,
    RectangleShape,
    UnsupportedShapeError,
    parse_shape_event,
)
from .state_store import CommitPolicy, VisualizationStateStore

__all__ = [
    "FilterOutcome",
    "FilterStatus",
    "GeoFilterService",
    "GeoFilterQueryBuilder",
    "CircleShape",
    "LatLng",
    "PolygonShape",
    "PolylineShape",
    "RectangleShape",
    "UnsupportedShapeError",
    "parse_shape_event",
    "CommitPolicy",
    "VisualizationStateStore",
]

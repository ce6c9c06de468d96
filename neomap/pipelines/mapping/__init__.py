"""
Mapping Pipeline Module
Turns graph query results into positioned, styled map entities and a fitted viewport
"""
from .pipeline import MapChartPipeline
from .graph_entities import (
    GraphAccumulator,
    NodeEntity,
    PixelDimensions,
    PositionedRelationship,
    RelationshipEntity,
    ViewportFit,
    VisualizationState,
)

__all__ = [
    "MapChartPipeline",
    "GraphAccumulator",
    "NodeEntity",
    "PixelDimensions",
    "PositionedRelationship",
    "RelationshipEntity",
    "ViewportFit",
    "VisualizationState",
]

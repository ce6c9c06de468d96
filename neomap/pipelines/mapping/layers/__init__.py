"""
Map Layers Module
GeoJSON payloads consumed by the marker, line and heatmap renderers
"""
from .map_layers import (
    build_heatmap_layer,
    build_layers,
    build_line_layer,
    build_marker_layer,
    build_tile_layer,
)

__all__ = [
    "build_heatmap_layer",
    "build_layers",
    "build_line_layer",
    "build_marker_layer",
    "build_tile_layer",
]

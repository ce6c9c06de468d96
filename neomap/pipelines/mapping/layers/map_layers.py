"""
Map Layers
GeoJSON payloads for the marker, line and heatmap layers

Each builder receives the full node/link sequences of a state and only
shapes them for drawing. GeoJSON coordinates are ``[lon, lat]``; the
``pos``/``arrow`` helpers stay ``[lat, lon]`` like the rest of the state.
"""
import logging
from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ....config.settings import LayerType, MapChartSettings
from ....utils.serialization import to_jsonable
from ..graph_entities import VisualizationState

logger = logging.getLogger(__name__)


def _feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}


def build_marker_layer(state: VisualizationState) -> Dict[str, Any]:
    features = []
    for node in state.nodes:
        if node.pos is None:
            continue
        lat, lon = node.pos
        features.append({
            "type": "Feature",
            "geometry": mapping(Point(lon, lat)),
            "properties": {
                "id": to_jsonable(node.id),
                "labels": list(node.labels),
                "color": node.color,
                "size": to_jsonable(node.size),
                "pos": [lat, lon],
                "properties": to_jsonable(node.properties),
            },
        })
    return _feature_collection(features)


def build_line_layer(state: VisualizationState) -> Dict[str, Any]:
    features = []
    for link in state.links:
        if link.start is None or link.end is None:
            continue
        line = LineString([(link.start[1], link.start[0]), (link.end[1], link.end[0])])
        # direction arrow sits at the midpoint of the line
        midpoint = line.interpolate(0.5, normalized=True)
        features.append({
            "type": "Feature",
            "geometry": mapping(line),
            "properties": {
                "id": to_jsonable(link.id),
                "type": link.type,
                "width": to_jsonable(link.width),
                "color": to_jsonable(link.color),
                "arrow": [midpoint.y, midpoint.x],
                "properties": to_jsonable(link.properties),
            },
        })
    return _feature_collection(features)


def build_heatmap_layer(state: VisualizationState, intensity: float = 1.0) -> Dict[str, Any]:
    points = [[node.pos[0], node.pos[1], intensity] for node in state.nodes if node.pos is not None]
    return {"type": "heatmap", "points": points}


def build_tile_layer(settings: MapChartSettings) -> Dict[str, Any]:
    return {
        "url": settings.provider_url,
        "attribution": settings.attribution,
        "max_zoom": settings.max_zoom,
    }


def build_layers(state: VisualizationState, settings: MapChartSettings) -> Dict[str, Any]:
    """
    Build the layers for the configured layer type.

    ``markers`` draws nodes and relationship lines; ``heatmap`` draws only
    the heatmap. The tile layer is always present.
    """
    layers: Dict[str, Any] = {
        "layer_type": settings.layer_type.value,
        "tiles": build_tile_layer(settings),
        "view": {
            "center": [state.center_latitude, state.center_longitude],
            "zoom": state.zoom,
        },
    }
    if settings.layer_type == LayerType.HEATMAP:
        layers["heatmap"] = build_heatmap_layer(state)
    else:
        layers["markers"] = build_marker_layer(state)
        layers["lines"] = build_line_layer(state)
    logger.debug(f"🧱 Built {settings.layer_type.value} layers for {len(state.nodes)} nodes")
    return layers

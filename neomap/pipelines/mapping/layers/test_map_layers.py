from __future__ import annotations

import pytest

from ....config.settings import LayerType, MapChartSettings
from ..graph_entities import NodeEntity, PositionedRelationship, VisualizationState
from .map_layers import build_heatmap_layer, build_layers, build_line_layer, build_marker_layer


@pytest.fixture
def state() -> VisualizationState:
    nodes = (
        NodeEntity(id=1, labels=["City"], first_label="City", size="large", properties={"name": "A"}, pos=(10.0, 20.0), color="red"),
        NodeEntity(id=2, labels=["City"], first_label="City", size="large", pos=(12.0, 24.0), color="red"),
        NodeEntity(id=3, labels=["City"], first_label="City", size="large"),
    )
    links = (
        PositionedRelationship(id=9, source=1, target=2, type="ROAD", width=2, color="#666", start=(10.0, 20.0), end=(12.0, 24.0)),
    )
    return VisualizationState(nodes=nodes, links=links, center_latitude=11.0, center_longitude=22.0, zoom=5)


def test_marker_layer_uses_geojson_axis_order(state: VisualizationState) -> None:
    layer = build_marker_layer(state)

    assert layer["type"] == "FeatureCollection"
    assert len(layer["features"]) == 2
    first = layer["features"][0]
    assert list(first["geometry"]["coordinates"]) == [20.0, 10.0]
    assert first["properties"]["pos"] == [10.0, 20.0]
    assert first["properties"]["properties"] == {"name": "A"}


def test_line_layer_places_arrow_at_midpoint(state: VisualizationState) -> None:
    (feature,) = build_line_layer(state)["features"]

    assert feature["geometry"]["type"] == "LineString"
    assert [list(c) for c in feature["geometry"]["coordinates"]] == [[20.0, 10.0], [24.0, 12.0]]
    assert feature["properties"]["arrow"] == pytest.approx([11.0, 22.0])
    assert feature["properties"]["width"] == 2


def test_heatmap_layer_skips_unpositioned_nodes(state: VisualizationState) -> None:
    assert build_heatmap_layer(state)["points"] == [[10.0, 20.0, 1.0], [12.0, 24.0, 1.0]]


def test_layer_type_selects_layers(state: VisualizationState) -> None:
    markers = build_layers(state, MapChartSettings())
    heatmap = build_layers(state, MapChartSettings(layer_type=LayerType.HEATMAP))

    assert {"markers", "lines"} <= set(markers) and "heatmap" not in markers
    assert "heatmap" in heatmap and "markers" not in heatmap
    assert markers["tiles"]["url"].startswith("https://{s}.tile.openstreetmap.org")
    assert markers["view"] == {"center": [11.0, 22.0], "zoom": 5}

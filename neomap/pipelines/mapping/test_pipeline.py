from __future__ import annotations

from typing import Any, Dict, List

from ...config.color_schemes import CATEGORICAL_COLOR_SCHEMES
from ...config.settings import MapChartSettings
from .graph_entities import VisualizationState
from .pipeline import MapChartPipeline


def json_node(identity: int, labels: List[str], **props: Any) -> Dict[str, Any]:
    return {"identity": identity, "labels": labels, "properties": props}


def json_rel(identity: int, start: int, end: int, rel_type: str = "R") -> Dict[str, Any]:
    return {"identity": identity, "start": start, "end": end, "type": rel_type, "properties": {}}


def test_single_city_node() -> None:
    records = [[json_node(1, ["City"], latitude=40.7, longitude=-74.0)]]
    state = MapChartPipeline().build_state(records)

    (node,) = state.nodes
    assert node.pos == (40.7, -74.0)
    assert node.color == CATEGORICAL_COLOR_SCHEMES["neodash"][0]
    assert state.center_latitude == 40.7
    assert state.center_longitude == -74.0
    # one distinct coordinate has no finite fit; the pipeline clamps it
    assert state.zoom == 0


def test_malformed_point_node_gets_no_position_and_no_links() -> None:
    records = [[
        json_node(1, ["Site"], location={"srid": 4326, "x": "n/a", "y": 12.0}),
        json_node(2, ["Site"], latitude=1, longitude=1),
        json_rel(5, 1, 2),
        json_rel(6, 2, 1),
    ]]
    state = MapChartPipeline().build_state(records)

    broken = next(n for n in state.nodes if n.id == 1)
    assert broken.pos is None
    assert state.links == ()


def test_links_present_iff_both_endpoints_positioned() -> None:
    records = [[
        json_node(1, ["A"], lat=0, long=0),
        json_node(2, ["A"], lat=1, long=1),
        json_node(3, ["A"]),
        json_rel(10, 1, 2),
        json_rel(11, 2, 3),
        json_rel(12, 1, 4),
    ]]
    state = MapChartPipeline().build_state(records)

    positioned = {n.id for n in state.nodes if n.pos is not None}
    assert positioned == {1, 2}
    assert [l.id for l in state.links] == [10]
    for link in state.links:
        assert link.source in positioned and link.target in positioned


def test_reingesting_same_records_yields_identical_state() -> None:
    records = [
        [json_node(1, ["A"], lat=0, long=0), json_rel(10, 1, 2), json_node(2, ["B"], lat=2, long=3)],
        [json_node(1, ["A"], lat=0, long=0), json_rel(10, 1, 2)],
    ]
    pipeline = MapChartPipeline()
    first = pipeline.build_state(records)
    second = pipeline.build_state(records + records)

    assert first == second
    assert len(first.nodes) == 2
    assert len(first.links) == 1


def test_empty_records_give_empty_state() -> None:
    assert MapChartPipeline().build_state([]) == VisualizationState.empty()


def test_state_dict_is_json_ready() -> None:
    records = [[{"label": "Sensor", "id": "s1", "latitude": 1, "longitude": 2, "location": {"srid": 4326, "x": 2, "y": 1}}]]
    state = MapChartPipeline(MapChartSettings(default_node_size="small")).build_state(records)

    payload = state.to_dict()
    node = payload["nodes"][0]
    assert node["id"] == "s1"
    assert node["firstLabel"] == "Sensor"
    assert node["size"] == "small"
    assert node["pos"] == [1.0, 2.0]
    assert payload["zoom"] == 0


def test_malformed_fields_still_build_state() -> None:
    records = [
        [{"label": "X", "id": [1, 2]}, {"type": "R", "id": 1, "start": {"a": 1}, "end": 2}],
        [{"identity": 1, "labels": ["A"], "properties": [1, 2]}, {"segments": [None]}],
        [json_node(2, ["A"], lat=1, long=2)],
    ]
    state = MapChartPipeline().build_state(records)

    assert sorted(n.id for n in state.nodes) == [1, 2]
    assert state.center_latitude == 1.0
    assert state.links == ()

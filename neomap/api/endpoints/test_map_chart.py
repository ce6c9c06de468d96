from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ...services.map_session import MapChartSession, get_map_session
from ..router import api_router

CITIES = [
    [{"identity": 1, "labels": ["City"], "properties": {"name": "Utrecht", "latitude": 52.09, "longitude": 5.12}}],
    [{"identity": 2, "labels": ["City"], "properties": {"name": "Delft", "latitude": 52.01, "longitude": 4.36}}],
]


@dataclass
class FakeChannel:
    results: List[Any] = field(default_factory=lambda: list(CITIES))
    calls: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    error: Optional[Exception] = None

    async def run(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        self.calls.append((query, dict(parameters or {})))
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def client(channel: FakeChannel) -> TestClient:
    app = FastAPI()
    app.include_router(api_router)
    session = MapChartSession(channel)
    app.dependency_overrides[get_map_session] = lambda: session
    return TestClient(app)


def test_render_returns_state(client: TestClient, channel: FakeChannel) -> None:
    response = client.post("/api/map/render", json={"records": CITIES, "dimensions": {"width": 600, "height": 400}})

    assert response.status_code == 200
    state = response.json()["state"]
    assert [n["id"] for n in state["nodes"]] == [1, 2]
    assert state["centerLatitude"] == pytest.approx(52.05)
    assert channel.calls == []
    assert client.get("/api/map/state").json()["state"] == state


def test_render_applies_report_settings(client: TestClient) -> None:
    response = client.post(
        "/api/map/render",
        json={"records": CITIES, "settings": {"defaultNodeSize": "small", "nodeColorProp": "", "layerType": "heatmap"}},
    )

    assert {n["size"] for n in response.json()["state"]["nodes"]} == {"small"}
    config = client.get("/api/map/config").json()
    assert config["settings"]["layer_type"] == "heatmap"
    assert config["settings"]["node_color_prop"] == "color"
    assert "heatmap" in client.get("/api/map/layers").json()["layers"]


def test_query_then_filter_then_clear(client: TestClient, channel: FakeChannel) -> None:
    loaded = client.post("/api/map/query", json={"query": "MATCH (n:City) RETURN n", "parameters": {"limit": 5}})
    assert loaded.status_code == 200
    assert loaded.json()["status"] == "applied"

    filtered = client.post("/api/map/filter", json={"shape": {"kind": "circle", "lat": 52, "lng": 5, "radius": 1000}})
    assert filtered.status_code == 200
    assert "point.distance(n.location, point({latitude: 52, longitude: 5})) <= 1000" in channel.calls[-1][0]

    cleared = client.delete("/api/map/filter", params={"width": 800})
    assert cleared.status_code == 200
    assert channel.calls[-1] == ("MATCH (n:City) RETURN n", {"limit": 5})


def test_unknown_shape_is_bad_request(client: TestClient, channel: FakeChannel) -> None:
    response = client.post("/api/map/filter", json={"shape": {"kind": "circlemarker", "lat": 1, "lng": 2}})

    assert response.status_code == 400
    assert channel.calls == []


def test_channel_failure_is_bad_gateway(client: TestClient, channel: FakeChannel) -> None:
    channel.error = RuntimeError("ServiceUnavailable")
    response = client.post("/api/map/query", json={"query": "MATCH (n) RETURN n"})

    assert response.status_code == 502
    assert "ServiceUnavailable" in response.json()["detail"]


def test_layers_for_markers(client: TestClient) -> None:
    client.post("/api/map/render", json={"records": CITIES})
    layers = client.get("/api/map/layers").json()["layers"]

    assert len(layers["markers"]["features"]) == 2
    assert layers["lines"]["features"] == []
    assert layers["tiles"]["attribution"]

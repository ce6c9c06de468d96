from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ...pipelines.mapping.pipeline import MapChartPipeline
from ..query.query_channel import CallbackQueryChannel
from .filter_service import FilterStatus, GeoFilterService
from .shapes import CircleShape
from .state_store import CommitPolicy, VisualizationStateStore


def city(identity: int, lat: float, lon: float) -> Dict[str, Any]:
    return {"identity": identity, "labels": ["City"], "properties": {"latitude": lat, "longitude": lon}}


@dataclass
class FakeChannel:
    results: List[List[Any]] = field(default_factory=list)
    calls: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    error: Optional[Exception] = None

    async def run(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        self.calls.append((query, dict(parameters or {})))
        if self.error is not None:
            raise self.error
        return self.results.pop(0) if self.results else []


@dataclass
class GatedChannel:
    """Completes each query only when its gate is released."""

    gates: Dict[str, asyncio.Event] = field(default_factory=dict)
    responses: Dict[str, List[Any]] = field(default_factory=dict)

    async def run(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        key = "circle" if "point.distance" in query else "rectangle"
        await self.gates[key].wait()
        return self.responses[key]


def make_service(channel, policy: CommitPolicy = CommitPolicy.LAST_WRITE_WINS) -> GeoFilterService:
    return GeoFilterService(channel, MapChartPipeline(), VisualizationStateStore(policy))


def test_apply_circle_reingests_results() -> None:
    channel = FakeChannel(results=[[[city(1, 10, 20)]]])
    service = make_service(channel)

    outcome = asyncio.run(service.apply_shape({"kind": "circle", "lat": 10, "lon": 20, "radius": 500}))

    assert outcome.status == FilterStatus.APPLIED
    assert "<= 500" in channel.calls[0][0]
    assert [n.id for n in service.state.nodes] == [1]
    assert outcome.state is service.state


def test_unknown_shape_is_rejected_without_query() -> None:
    channel = FakeChannel()
    service = make_service(channel)
    before = service.state

    outcome = asyncio.run(service.apply_shape({"kind": "hexagon"}))

    assert outcome.status == FilterStatus.REJECTED
    assert "hexagon" in outcome.error
    assert channel.calls == []
    assert service.state is before


def test_channel_failure_keeps_state() -> None:
    channel = FakeChannel(results=[[[city(1, 1, 1)]]])
    service = make_service(channel)
    asyncio.run(service.load("MATCH (n) RETURN n"))
    loaded = service.state

    channel.error = RuntimeError("connection refused")
    outcome = asyncio.run(service.apply_shape(CircleShape(lat=1, lon=1, radius=10)))

    assert outcome.status == FilterStatus.FAILED
    assert "connection refused" in outcome.error
    assert service.state is loaded


def test_clear_filter_reissues_original_query() -> None:
    channel = FakeChannel(results=[[[city(1, 1, 1)], [city(2, 2, 2)]], [[city(1, 1, 1)]], [[city(1, 1, 1)], [city(2, 2, 2)]]])
    service = make_service(channel)

    asyncio.run(service.load("MATCH (n)-[r]->(m) RETURN n, r, m", {"limit": 10}))
    asyncio.run(service.apply_shape(CircleShape(lat=1, lon=1, radius=10)))
    assert len(service.state.nodes) == 1

    outcome = asyncio.run(service.clear_filter())

    assert outcome.status == FilterStatus.APPLIED
    assert channel.calls[-1] == ("MATCH (n)-[r]->(m) RETURN n, r, m", {"limit": 10})
    assert len(service.state.nodes) == 2


def test_empty_result_replaces_state_with_empty_map() -> None:
    channel = FakeChannel(results=[[[city(1, 1, 1)]], []])
    service = make_service(channel)
    asyncio.run(service.load("MATCH (n) RETURN n"))

    asyncio.run(service.apply_shape(CircleShape(lat=50, lon=50, radius=1)))

    assert service.state.nodes == ()
    assert service.state.zoom == 0


async def _race(policy: CommitPolicy):
    channel = GatedChannel(
        gates={"circle": asyncio.Event(), "rectangle": asyncio.Event()},
        responses={"circle": [[city(1, 1, 1)]], "rectangle": [[city(2, 2, 2)]]},
    )
    service = make_service(channel, policy)
    first = asyncio.create_task(service.apply_shape(CircleShape(lat=1, lon=1, radius=10)))
    second = asyncio.create_task(service.apply_shape({
        "kind": "rectangle",
        "topLeft": {"lat": 3, "lng": 1},
        "bottomRight": {"lat": 1, "lng": 3},
    }))
    await asyncio.sleep(0)
    # the later request completes first
    channel.gates["rectangle"].set()
    await second
    channel.gates["circle"].set()
    return service, await first, await second


def test_last_write_wins_lets_slow_earlier_request_overwrite() -> None:
    service, first, second = asyncio.run(_race(CommitPolicy.LAST_WRITE_WINS))

    assert first.status == FilterStatus.APPLIED
    assert second.status == FilterStatus.APPLIED
    assert [n.id for n in service.state.nodes] == [1]


def test_latest_request_policy_drops_stale_completion() -> None:
    service, first, second = asyncio.run(_race(CommitPolicy.LATEST_REQUEST))

    assert first.status == FilterStatus.STALE
    assert second.status == FilterStatus.APPLIED
    assert [n.id for n in service.state.nodes] == [2]


def test_callback_channel_adapter() -> None:
    seen = []

    def execute(query, parameters, on_complete):
        seen.append((query, parameters))
        on_complete([[city(7, 1, 2)]])

    service = make_service(CallbackQueryChannel(execute))
    outcome = asyncio.run(service.load("MATCH (n) RETURN n", {"x": 1}))

    assert seen == [("MATCH (n) RETURN n", {"x": 1})]
    assert [n.id for n in outcome.state.nodes] == [7]


def test_store_notifies_subscribers() -> None:
    store = VisualizationStateStore()
    received = []
    store.subscribe(received.append)
    service = GeoFilterService(FakeChannel(results=[[[city(1, 1, 1)]]]), MapChartPipeline(), store)

    asyncio.run(service.load("MATCH (n) RETURN n"))

    assert received == [service.state]


def test_out_of_range_coordinates_are_rejected_without_query() -> None:
    channel = FakeChannel()
    service = make_service(channel)

    outcome = asyncio.run(service.apply_shape({"kind": "circle", "lat": float("nan"), "lon": 20, "radius": 500}))

    assert outcome.status == FilterStatus.REJECTED
    assert channel.calls == []

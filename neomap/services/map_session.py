"""
Map Chart Session
Wires settings, pipeline, query channel and state store for one map chart
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..config.settings import MapChartSettings
from ..pipelines.mapping.pipeline import MapChartPipeline
from .geo_filter.filter_service import GeoFilterService
from .geo_filter.state_store import CommitPolicy, VisualizationStateStore
from .query.query_channel import QueryChannel

logger = logging.getLogger(__name__)


class MapChartSession:
    def __init__(
        self,
        channel: QueryChannel,
        settings: Optional[MapChartSettings] = None,
        policy: CommitPolicy = CommitPolicy.LAST_WRITE_WINS,
    ) -> None:
        self.channel = channel
        self.store = VisualizationStateStore(policy)
        self.filter_service: Optional[GeoFilterService] = None
        self.configure(settings or MapChartSettings())

    def configure(self, settings: MapChartSettings) -> None:
        """Apply new chart settings; the current state and original query are kept."""
        original = self.filter_service
        self.settings = settings
        self.pipeline = MapChartPipeline(settings)
        self.filter_service = GeoFilterService(self.channel, self.pipeline, self.store)
        if original is not None:
            self.filter_service.original_query = original.original_query
            self.filter_service.original_parameters = original.original_parameters

    def update_settings(self, raw: Optional[Mapping[str, Any]]) -> None:
        if raw:
            self.configure(MapChartSettings.from_report_settings(raw))

    def close(self) -> None:
        close = getattr(self.channel, "close", None)
        if callable(close):
            close()


_session: Optional[MapChartSession] = None


def get_map_session() -> MapChartSession:
    """Process-wide session backed by the Neo4j channel (created lazily)."""
    global _session
    if _session is None:
        from .query.neo4j_channel import Neo4jQueryChannel

        _session = MapChartSession(Neo4jQueryChannel())
        logger.info("🗺️ Map chart session initialized")
    return _session


def close_map_session() -> None:
    global _session
    if _session is not None:
        _session.close()
        _session = None

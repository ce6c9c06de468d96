"""
Geo-Filter Service
Drawn shape -> filter query -> query channel -> fresh map state

Every round trip produces a new VisualizationState and commits it to the
store; which completion wins under concurrent requests is decided by the
store's CommitPolicy.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ...config.settings import DEFAULT_FILTER_QUERY
from ...pipelines.mapping.graph_entities import PixelDimensions, VisualizationState
from ...pipelines.mapping.pipeline import MapChartPipeline
from ..query.query_channel import QueryChannel
from .query_builder import GeoFilterQueryBuilder
from .shapes import UnsupportedShapeError, parse_shape_event
from .state_store import VisualizationStateStore

logger = logging.getLogger(__name__)


class FilterStatus(str, Enum):
    APPLIED = "applied"
    REJECTED = "rejected"
    FAILED = "failed"
    STALE = "stale"


@dataclass
class FilterOutcome:
    status: FilterStatus
    query: Optional[str] = None
    state: Optional[VisualizationState] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == FilterStatus.APPLIED


class GeoFilterService:
    def __init__(
        self,
        channel: QueryChannel,
        pipeline: MapChartPipeline,
        store: Optional[VisualizationStateStore] = None,
        builder: Optional[GeoFilterQueryBuilder] = None,
    ) -> None:
        self.channel = channel
        self.pipeline = pipeline
        self.store = store or VisualizationStateStore()
        self.builder = builder or GeoFilterQueryBuilder(pipeline.settings)
        self.original_query: str = f"{DEFAULT_FILTER_QUERY}\nRETURN n, r, m"
        self.original_parameters: dict = {}

    @property
    def state(self) -> VisualizationState:
        return self.store.current

    async def load(
        self,
        query: str,
        parameters: Optional[Mapping[str, Any]] = None,
        dimensions: Optional[PixelDimensions] = None,
    ) -> FilterOutcome:
        """Run the chart's own query and remember it for clearing filters."""
        self.original_query = query
        self.original_parameters = dict(parameters or {})
        return await self._round_trip(query, self.original_parameters, dimensions)

    async def apply_shape(self, shape: Any, dimensions: Optional[PixelDimensions] = None) -> FilterOutcome:
        """
        Filter the map to the drawn shape

        Args:
            shape: A shape model or a raw shape-drawn event payload
            dimensions: Pixel size of the map viewport

        Returns:
            FilterOutcome: REJECTED without any query for unknown shapes
        """
        try:
            if isinstance(shape, Mapping):
                shape = parse_shape_event(shape)
            query = self.builder.build(shape)
        except UnsupportedShapeError as e:
            logger.warning(f"🚫 Geo filter rejected: {e}")
            return FilterOutcome(status=FilterStatus.REJECTED, error=str(e))

        return await self._round_trip(query, {}, dimensions)

    async def clear_filter(self, dimensions: Optional[PixelDimensions] = None) -> FilterOutcome:
        """Shape deleted: re-issue the original query."""
        query = self.builder.build_clear_query(self.original_query)
        logger.info("🧹 Clearing geo filter")
        return await self._round_trip(query, self.original_parameters, dimensions)

    async def _round_trip(
        self,
        query: str,
        parameters: Mapping[str, Any],
        dimensions: Optional[PixelDimensions],
    ) -> FilterOutcome:
        sequence = self.store.next_sequence()
        try:
            records = await self.channel.run(query, parameters)
        except Exception as e:
            logger.error(f"❌ Map query #{sequence} failed: {e}")
            return FilterOutcome(status=FilterStatus.FAILED, query=query, error=str(e))

        state = self.pipeline.build_state(records, dimensions)
        if not self.store.commit(state, sequence):
            return FilterOutcome(status=FilterStatus.STALE, query=query, state=state)
        return FilterOutcome(status=FilterStatus.APPLIED, query=query, state=state)

"""
Map Chart Pipeline
Main orchestrator turning query result records into a render-ready map state
"""
import logging
from typing import Any, Iterable, Optional

from ...config.settings import MapChartSettings
from ...services.styling.style_rules import StyleRuleEvaluator
from .enrich.entity_enricher import EntityEnricher
from .graph_entities import PixelDimensions, VisualizationState
from .ingest.record_ingestor import RecordIngestor
from .viewport.fit_calculator import ViewportFitCalculator, clamp_viewport

logger = logging.getLogger(__name__)


class MapChartPipeline:
    """
    Pipeline for records -> ingest -> enrich -> viewport fit -> state
    """

    def __init__(
        self,
        settings: Optional[MapChartSettings] = None,
        style_evaluator: Optional[StyleRuleEvaluator] = None,
    ):
        self.settings = settings or MapChartSettings()
        self.ingestor = RecordIngestor(self.settings)
        self.enricher = EntityEnricher(self.settings, style_evaluator)
        self.fit_calculator = ViewportFitCalculator(self.settings)

    def build_state(
        self,
        records: Iterable[Any],
        dimensions: Optional[PixelDimensions] = None,
    ) -> VisualizationState:
        """
        Build a fresh visualization state from result records.

        Args:
            records: Query result rows
            dimensions: Pixel size of the map viewport

        Returns:
            VisualizationState: New state; never a patch of a previous one
        """
        accumulator = self.ingestor.ingest(records)
        nodes, links = self.enricher.enrich(accumulator)
        raw_fit = self.fit_calculator.fit(nodes, dimensions)
        if raw_fit.zoom is None:
            logger.info("🔭 No finite viewport fit, falling back to default view")
        fit = clamp_viewport(raw_fit, self.settings.max_zoom)

        state = VisualizationState(
            nodes=tuple(nodes),
            links=tuple(links),
            center_latitude=fit.center_latitude,
            center_longitude=fit.center_longitude,
            zoom=fit.zoom,
        )
        logger.info(
            f"🗺️ Built map state: {len(state.nodes)} nodes, {len(state.links)} links, "
            f"center=({state.center_latitude:.5f}, {state.center_longitude:.5f}) zoom={state.zoom}"
        )
        return state

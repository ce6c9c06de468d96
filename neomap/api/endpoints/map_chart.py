"""
Map Chart Endpoints
Map state from graph query results and geo filters from drawn shapes
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ...pipelines.mapping.graph_entities import PixelDimensions
from ...pipelines.mapping.layers.map_layers import build_layers, build_tile_layer
from ...services.geo_filter.filter_service import FilterOutcome, FilterStatus
from ...services.map_session import MapChartSession, get_map_session

logger = logging.getLogger(__name__)
router = APIRouter()


class DimensionsBody(BaseModel):
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)

    def to_dimensions(self) -> PixelDimensions:
        return PixelDimensions(width=self.width, height=self.height)


class RenderRequest(BaseModel):
    records: List[Any] = Field(default_factory=list)
    settings: Optional[Dict[str, Any]] = None
    dimensions: Optional[DimensionsBody] = None


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    settings: Optional[Dict[str, Any]] = None
    dimensions: Optional[DimensionsBody] = None


class ShapeFilterRequest(BaseModel):
    shape: Dict[str, Any]
    dimensions: Optional[DimensionsBody] = None


def _dimensions(body: Optional[DimensionsBody]) -> Optional[PixelDimensions]:
    return body.to_dimensions() if body else None


def _outcome_response(outcome: FilterOutcome) -> Dict[str, Any]:
    if outcome.status == FilterStatus.REJECTED:
        raise HTTPException(status_code=400, detail=outcome.error)
    if outcome.status == FilterStatus.FAILED:
        raise HTTPException(status_code=502, detail=f"Query failed: {outcome.error}")
    return {
        "success": outcome.success,
        "status": outcome.status.value,
        "query": outcome.query,
        "state": outcome.state.to_dict() if outcome.state else None,
    }


@router.get("/config")
async def get_map_config(session: MapChartSession = Depends(get_map_session)) -> Dict[str, Any]:
    """Current chart settings and tile layer"""
    return {
        "success": True,
        "settings": session.settings.model_dump(mode="json"),
        "tiles": build_tile_layer(session.settings),
    }


@router.post("/render")
async def render_records(request: RenderRequest, session: MapChartSession = Depends(get_map_session)) -> Dict[str, Any]:
    """
    Build map state directly from result records (no query is run)

    Records are rows of fields; typed entities use their JSON form.
    """
    session.update_settings(request.settings)
    state = session.pipeline.build_state(request.records, _dimensions(request.dimensions))
    session.store.commit(state, session.store.next_sequence())
    return {"success": True, "state": state.to_dict()}


@router.post("/query")
async def run_map_query(request: QueryRequest, session: MapChartSession = Depends(get_map_session)) -> Dict[str, Any]:
    """Run the chart query; it becomes the query that clearing a filter returns to"""
    logger.info("🗺️ Map query requested")
    session.update_settings(request.settings)
    outcome = await session.filter_service.load(request.query, request.parameters, _dimensions(request.dimensions))
    return _outcome_response(outcome)


@router.post("/filter")
async def apply_geo_filter(request: ShapeFilterRequest, session: MapChartSession = Depends(get_map_session)) -> Dict[str, Any]:
    """Filter the map to a drawn circle, rectangle, polygon or polyline"""
    logger.info(f"✏️ Shape drawn: {request.shape.get('kind')}")
    outcome = await session.filter_service.apply_shape(request.shape, _dimensions(request.dimensions))
    return _outcome_response(outcome)


@router.delete("/filter")
async def clear_geo_filter(
    width: Optional[float] = Query(None, gt=0),
    height: Optional[float] = Query(None, gt=0),
    session: MapChartSession = Depends(get_map_session),
) -> Dict[str, Any]:
    """Shape deleted: re-run the original query"""
    outcome = await session.filter_service.clear_filter(PixelDimensions(width=width, height=height))
    return _outcome_response(outcome)


@router.get("/state")
async def get_map_state(session: MapChartSession = Depends(get_map_session)) -> Dict[str, Any]:
    return {"success": True, "state": session.store.current.to_dict()}


@router.get("/layers")
async def get_map_layers(session: MapChartSession = Depends(get_map_session)) -> Dict[str, Any]:
    """Render-ready layers for the configured layer type"""
    return {"success": True, "layers": build_layers(session.store.current, session.settings)}

"""
Viewport Fit Calculator
Center coordinate and zoom level that frame all positioned nodes

Uses a flat per-pixel approximation of degrees, not geodesic distance.
"""
import logging
import math
from typing import Iterable, List, Optional

from ....config.settings import MapChartSettings
from ..graph_entities import NodeEntity, PixelDimensions, ViewportFit

logger = logging.getLogger(__name__)


def axis_zoom(values: List[float], pixels: float, per_pixel_scale: float) -> Optional[int]:
    """
    Zoom level that fits ``values`` into ``pixels``.

    Returns None when the fit is unbounded (all values equal).
    """
    axis_max = max(values)
    axis_min = min(values)
    span = axis_max - (axis_max - axis_min) / 2.0
    scale_factor = pixels / per_pixel_scale
    projected = (axis_max - span) / scale_factor
    if projected <= 0 or not math.isfinite(projected):
        return None
    zoom = math.log2(1.0 / projected)
    if not math.isfinite(zoom):
        return None
    return math.ceil(zoom)


class ViewportFitCalculator:
    def __init__(self, settings: Optional[MapChartSettings] = None):
        self.settings = settings or MapChartSettings()

    def fit(self, nodes: Iterable[NodeEntity], dimensions: Optional[PixelDimensions] = None) -> ViewportFit:
        """
        Compute center and zoom for the positioned nodes.

        A None zoom means no finite fit exists (no positions, or a single
        distinct coordinate); callers clamp it with ``clamp_viewport``.
        """
        dimensions = dimensions or PixelDimensions()
        positions = [n.pos for n in nodes if n.pos is not None]
        if not positions:
            return ViewportFit(center_latitude=None, center_longitude=None, zoom=None)

        latitudes = [p[0] for p in positions]
        longitudes = [p[1] for p in positions]

        width = dimensions.width or self.settings.default_dimension
        height = dimensions.height or self.settings.default_dimension
        lat_zoom = axis_zoom(latitudes, width, self.settings.width_scale)
        long_zoom = axis_zoom(longitudes, height, self.settings.height_scale)

        finite = [z for z in (lat_zoom, long_zoom) if z is not None]
        zoom = min(finite) if finite else None

        fit = ViewportFit(
            center_latitude=sum(latitudes) / len(latitudes),
            center_longitude=sum(longitudes) / len(longitudes),
            zoom=zoom,
        )
        logger.debug(f"🔭 Viewport fit over {len(positions)} positions: {fit}")
        return fit


def clamp_viewport(fit: ViewportFit, max_zoom: int = 18) -> ViewportFit:
    """Replace non-finite values with safe defaults and bound zoom to [0, max_zoom]."""
    zoom = fit.zoom if fit.zoom is not None else 0
    return ViewportFit(
        center_latitude=fit.center_latitude if fit.center_latitude is not None else 0.0,
        center_longitude=fit.center_longitude if fit.center_longitude is not None else 0.0,
        zoom=max(0, min(int(zoom), max_zoom)),
    )

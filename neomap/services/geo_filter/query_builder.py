"""
Geo-Filter Query Builder
Builds Cypher filter queries from shapes drawn on the map
"""
import logging
from typing import Any, Iterable, Optional

from ...config.settings import MapChartSettings
from .shapes import (
    CircleShape,
    LatLng,
    PolygonShape,
    PolylineShape,
    RectangleShape,
    UnsupportedShapeError,
)

logger = logging.getLogger(__name__)

RETURN_CLAUSE = "RETURN n, r, m"


def format_number(value: float) -> str:
    """Render a coordinate or radius; integral values drop the trailing ``.0``."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def point_literal(point: LatLng) -> str:
    return f"{{latitude: {format_number(point.lat)}, longitude: {format_number(point.lng)}}}"


class GeoFilterQueryBuilder:
    """
    Builds geo-filter queries over the configured base match pattern.

    Every query matches ``filter_query``, constrains the location property of
    ``n`` and returns the full ``n, r, m`` pattern.
    """

    def __init__(self, settings: Optional[MapChartSettings] = None):
        self.settings = settings or MapChartSettings()

    @property
    def location(self) -> str:
        return f"n.{self.settings.location_prop}"

    def build(self, shape: Any) -> str:
        """
        Build the filter query for a drawn shape

        Args:
            shape: CircleShape, RectangleShape, PolygonShape or PolylineShape

        Returns:
            str: Cypher query

        Raises:
            UnsupportedShapeError: shape is not one of the supported kinds
        """
        if isinstance(shape, CircleShape):
            return self.build_circle_query(shape)
        if isinstance(shape, RectangleShape):
            return self.build_rectangle_query(shape)
        if isinstance(shape, PolygonShape):
            return self.build_polygon_query(shape)
        if isinstance(shape, PolylineShape):
            return self.build_polyline_query(shape)
        raise UnsupportedShapeError(f"Unsupported shape: {type(shape).__name__}")

    def build_circle_query(self, shape: CircleShape) -> str:
        center = point_literal(LatLng(lat=shape.lat, lng=shape.lon))
        where = f"point.distance({self.location}, point({center})) <= {format_number(shape.radius)}"
        logger.info(f"⭕ Built circle filter at ({shape.lat}, {shape.lon}) r={shape.radius}")
        return self._compose(where)

    def build_rectangle_query(self, shape: RectangleShape) -> str:
        lat_min, lat_max = shape.bottom_right.lat, shape.top_left.lat
        lon_min, lon_max = shape.top_left.lng, shape.bottom_right.lng
        if lat_min > lat_max or lon_min > lon_max:
            logger.warning(
                f"⚠️ Rectangle corners are inverted (lat {lat_min}..{lat_max}, lon {lon_min}..{lon_max}), normalizing"
            )
            lat_min, lat_max = sorted((lat_min, lat_max))
            lon_min, lon_max = sorted((lon_min, lon_max))

        where = (
            f"{self.location}.latitude >= {format_number(lat_min)} AND "
            f"{self.location}.latitude <= {format_number(lat_max)} AND\n"
            f"  {self.location}.longitude >= {format_number(lon_min)} AND "
            f"{self.location}.longitude <= {format_number(lon_max)}"
        )
        logger.info(f"▭ Built rectangle filter lat=[{lat_min}, {lat_max}] lon=[{lon_min}, {lon_max}]")
        return self._compose(where)

    def build_polygon_query(self, shape: PolygonShape) -> str:
        where = f"point.inPolygon({self.location}, [{self._point_list(shape.points)}])"
        logger.info(f"🔷 Built polygon filter with {len(shape.points)} vertices")
        return self._compose(where)

    def build_polyline_query(self, shape: PolylineShape) -> str:
        radius = shape.radius if shape.radius is not None else self.settings.polyline_radius
        where = (
            f"ANY(p IN [{self._point_list(shape.points)}] "
            f"WHERE point.distance({self.location}, point(p)) <= {format_number(radius)})"
        )
        logger.info(f"〰️ Built polyline filter with {len(shape.points)} points r={radius}")
        return self._compose(where)

    @staticmethod
    def build_clear_query(original_query: str) -> str:
        """Clearing a filter re-issues the original, unfiltered query."""
        return original_query

    @staticmethod
    def _point_list(points: Iterable[LatLng]) -> str:
        return ", ".join(point_literal(p) for p in points)

    def _compose(self, where: str) -> str:
        return f"{self.settings.filter_query}\nWHERE {where}\n{RETURN_CLAUSE}"

"""
Central configuration for map chart settings.

Process-level values come from the environment; per-report options live in
``MapChartSettings`` and mirror the map report's advanced settings.
"""
import os
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Logging
LOG_LEVEL: str = os.getenv("NEOMAP_LOG_LEVEL", "INFO").upper()
LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
RING_BUFFER_SIZE: int = int(os.getenv("RING_BUFFER_SIZE", "2000"))

# Graph database (URI and credentials are read when the driver is created)
NEO4J_DATABASE: Optional[str] = os.getenv("NEO4J_DATABASE")

# Thread pool size for blocking driver calls
QUERY_WORKERS: int = int(os.getenv("NEOMAP_QUERY_WORKERS", "2"))


DEFAULT_PROVIDER_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_ATTRIBUTION = '&copy; <a href="http://osm.org/copyright">OpenStreetMap</a> contributors'
DEFAULT_FILTER_QUERY = "MATCH (n)-[r]->(m)"


class LayerType(str, Enum):
    MARKERS = "markers"
    HEATMAP = "heatmap"


class NodeSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class MapChartSettings(BaseModel):
    """
    Options for one map chart.

    Field names are snake_case; the camelCase names used by saved report
    settings (``nodeColorProp``, ``defaultRelWidth``, ...) are accepted as
    aliases.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    layer_type: LayerType = Field(LayerType.MARKERS, alias="layerType")
    node_color_prop: str = Field("color", alias="nodeColorProp")
    default_node_size: NodeSize = Field(NodeSize.LARGE, alias="defaultNodeSize")
    rel_width_prop: str = Field("width", alias="relWidthProp")
    rel_color_prop: str = Field("color", alias="relColorProp")
    default_rel_width: float = Field(3.5, alias="defaultRelWidth")
    default_rel_color: str = Field("#666", alias="defaultRelColor")
    node_color_scheme: str = Field("neodash", alias="nodeColorScheme")
    default_node_color: str = Field("grey", alias="defaultNodeColor")
    filter_query: str = Field(DEFAULT_FILTER_QUERY, alias="filterQuery")
    location_prop: str = Field("location", alias="locationProp")
    polyline_radius: float = Field(500, alias="polylineRadius")
    provider_url: str = Field(DEFAULT_PROVIDER_URL, alias="providerUrl")
    attribution: str = Field(DEFAULT_ATTRIBUTION, alias="attribution")

    # Per pixel scaling factors for the latitude/longitude fit.
    width_scale: float = Field(8.55, alias="widthScale", gt=0)
    height_scale: float = Field(6.7, alias="heightScale", gt=0)
    default_dimension: float = Field(300, alias="defaultDimension", gt=0)
    max_zoom: int = Field(18, alias="maxZoom", ge=0)

    style_rules: List[Dict[str, Any]] = Field(default_factory=list, alias="styleRules")

    @field_validator("filter_query")
    @classmethod
    def _strip_filter_query(cls, value: str) -> str:
        return value.strip()

    @classmethod
    def from_report_settings(cls, raw: Optional[Mapping[str, Any]] = None) -> "MapChartSettings":
        """Build settings from a report's settings dict; empty values mean "use the default"."""
        if not raw:
            return cls()
        cleaned = {k: v for k, v in raw.items() if v is not None and v != "" and v != []}
        return cls.model_validate(cleaned)

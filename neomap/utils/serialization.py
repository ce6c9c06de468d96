"""
JSON-safe conversion for graph property values.

Driver values (spatial points, temporal types, enums) are turned into plain
JSON types so map state can be returned from the API.
"""
import math
from enum import Enum
from typing import Any, Mapping


def is_spatial_point(value: Any) -> bool:
    """True for driver Point objects and for mappings carrying srid/x/y."""
    if isinstance(value, Mapping):
        return all(value.get(k) is not None for k in ("srid", "x", "y"))
    return all(getattr(value, k, None) is not None for k in ("srid", "x", "y"))


def point_component(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def to_jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Enum):
        return value.value
    if not isinstance(value, Mapping) and is_spatial_point(value):
        point = {"srid": value.srid, "x": value.x, "y": value.y}
        # driver points are tuples; 2D points have no third component
        if isinstance(value, tuple) and len(value) > 2:
            point["z"] = value[2]
        return point
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    if hasattr(value, "iso_format"):
        return value.iso_format()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)

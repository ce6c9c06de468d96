"""
Drawn Shape Events
Validated geometry for the shapes a user can draw on the map
"""
from typing import Annotated, Any, List, Literal, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator


class UnsupportedShapeError(ValueError):
    """Raised for shape events whose kind is unknown or whose geometry is invalid."""


class LatLng(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180, validation_alias=AliasChoices("lng", "lon"))


class CircleShape(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    kind: Literal["circle"] = "circle"
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180, validation_alias=AliasChoices("lon", "lng"))
    radius: float = Field(ge=0)


class RectangleShape(BaseModel):
    kind: Literal["rectangle"] = "rectangle"
    top_left: LatLng = Field(validation_alias=AliasChoices("top_left", "topLeft"))
    bottom_right: LatLng = Field(validation_alias=AliasChoices("bottom_right", "bottomRight"))


class PolygonShape(BaseModel):
    kind: Literal["polygon"] = "polygon"
    points: List[LatLng] = Field(min_length=3)

    @field_validator("points", mode="before")
    @classmethod
    def _first_ring(cls, value: Any) -> Any:
        # Drawn polygons arrive as a list of rings; the outer ring is first.
        if isinstance(value, list) and value and isinstance(value[0], list):
            return value[0]
        return value


class PolylineShape(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    kind: Literal["polyline"] = "polyline"
    points: List[LatLng] = Field(min_length=1)
    radius: Optional[float] = Field(None, ge=0)


DrawnShape = Annotated[
    Union[CircleShape, RectangleShape, PolygonShape, PolylineShape],
    Field(discriminator="kind"),
]

SHAPE_KINDS = ("circle", "rectangle", "polygon", "polyline")

_shape_adapter: TypeAdapter = TypeAdapter(DrawnShape)


def parse_shape_event(payload: Mapping[str, Any]) -> Union[CircleShape, RectangleShape, PolygonShape, PolylineShape]:
    """
    Validate a raw shape-drawn event.

    Raises:
        UnsupportedShapeError: unknown kind or invalid geometry
    """
    kind = payload.get("kind") if isinstance(payload, Mapping) else None
    if kind not in SHAPE_KINDS:
        raise UnsupportedShapeError(f"Unsupported shape kind: {kind!r}")
    try:
        return _shape_adapter.validate_python(dict(payload))
    except ValidationError as e:
        raise UnsupportedShapeError(f"Invalid {kind} geometry: {e.error_count()} errors") from e

"""Pydantic domain models: bounding boxes, attribute schemas and generated features."""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from .config import MAX_ATTEMPTS, MAX_FEATURES

GeometryType = Literal["point", "line", "polygon"]
AreaSource = Literal["viewport", "drawn", "uploaded"]
AttributeValue = Union[str, int, float, bool]


class BoundingBox(BaseModel):
    """Axis-aligned lon/lat rectangle in EPSG:4326 degrees."""
    model_config = ConfigDict(frozen=True)

    west: float = Field(ge=-180, le=180)
    south: float = Field(ge=-90, le=90)
    east: float = Field(ge=-180, le=180)
    north: float = Field(ge=-90, le=90)

    @model_validator(mode="after")
    def check_west_le_east(self) -> "BoundingBox":
        if self.west > self.east:
            raise ValueError(f"west ({self.west}) must not be greater than east ({self.east})")
        return self

    @model_validator(mode="after")
    def check_south_le_north(self) -> "BoundingBox":
        if self.south > self.north:
            raise ValueError(f"south ({self.south}) must not be greater than north ({self.north})")
        return self

    @classmethod
    def from_list(cls, bbox: Sequence[float]) -> "BoundingBox":
        if len(bbox) != 4:
            raise ValueError(f"Bounding box needs 4 values [minLon, minLat, maxLon, maxLat], got {len(bbox)}")
        west, south, east, north = (float(v) for v in bbox)
        return cls(west=west, south=south, east=east, north=north)

    def as_list(self) -> list[float]:
        return [self.west, self.south, self.east, self.north]

    @property
    def lat_range(self) -> float:
        return self.north - self.south

    @property
    def lon_range(self) -> float:
        return self.east - self.west

    @property
    def center_lat(self) -> float:
        return (self.north + self.south) / 2

    @property
    def center_lon(self) -> float:
        return (self.east + self.west) / 2


# --- Attribute schema ---


def _parse_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError(f"'{value}' is not an ISO-8601 date or timestamp") from None
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class NumericRange(BaseModel):
    min: float
    max: float
    unit: Optional[str] = None

    @model_validator(mode="after")
    def check_min_le_max(self) -> "NumericRange":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not be greater than max ({self.max})")
        return self


class DateRange(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        return _parse_timestamp(v)

    @model_validator(mode="after")
    def check_start_le_end(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError(f"start ({self.start.isoformat()}) is after end ({self.end.isoformat()})")
        return self


class IdentifierFormat(BaseModel):
    prefix: str = ""
    digits: int = Field(default=6, ge=1, le=64)


class _Attribute(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Attribute name must not be blank")
        return v


class NominalAttribute(_Attribute):
    type: Literal["nominal"] = "nominal"
    values: list[AttributeValue] = Field(min_length=1)


class OrdinalAttribute(_Attribute):
    """Values are listed lowest to highest; ordering is metadata only."""
    type: Literal["ordinal"] = "ordinal"
    values: list[AttributeValue] = Field(min_length=1)


class QuantitativeAttribute(_Attribute):
    type: Literal["quantitative"] = "quantitative"
    range: NumericRange = Field(default_factory=lambda: NumericRange(min=0, max=100))


class TemporalAttribute(_Attribute):
    type: Literal["temporal"] = "temporal"
    range: DateRange


class IdentifierAttribute(_Attribute):
    type: Literal["identifier"] = "identifier"
    format: IdentifierFormat = Field(default_factory=IdentifierFormat)
    values: Optional[list[AttributeValue]] = None

    @field_validator("values")
    @classmethod
    def values_not_empty(cls, v: Optional[list]) -> Optional[list]:
        if v is not None and len(v) == 0:
            raise ValueError("An explicit identifier value set must not be empty")
        return v


AttributeDefinition = Annotated[
    Union[
        NominalAttribute,
        OrdinalAttribute,
        QuantitativeAttribute,
        TemporalAttribute,
        IdentifierAttribute,
    ],
    Field(discriminator="type"),
]

_schema_adapter = TypeAdapter(list[AttributeDefinition])


def parse_attribute_schema(raw: Sequence[Any]) -> list[AttributeDefinition]:
    """Validate a full attribute schema before any generation starts.

    Unknown kinds fail discriminator validation; duplicate names are rejected
    because later definitions would silently overwrite earlier ones.
    """
    definitions = _schema_adapter.validate_python(list(raw))
    seen: set[str] = set()
    for definition in definitions:
        if definition.name in seen:
            raise ValueError(f"Duplicate attribute name '{definition.name}'")
        seen.add(definition.name)
    return definitions


# --- Generation ---


class MeasureRange(BaseModel):
    """Closed [min, max] range of a measured quantity (meters or square meters)."""
    min: float = Field(ge=0)
    max: float = Field(ge=0)

    @model_validator(mode="after")
    def check_min_le_max(self) -> "MeasureRange":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not be greater than max ({self.max})")
        return self


class GenerationRequest(BaseModel):
    geometry_type: GeometryType
    quantity: int = Field(ge=1, le=MAX_FEATURES)
    attributes: list[AttributeDefinition] = Field(default_factory=list)
    area_constraint: AreaSource = "viewport"
    length_range: Optional[MeasureRange] = None
    area_range: Optional[MeasureRange] = None
    max_attempts: int = Field(default=MAX_ATTEMPTS, gt=0, le=10_000)
    seed: Optional[int] = None


class GeneratedFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    geometry_type: GeometryType
    geometry: dict[str, Any]
    properties: dict[str, Any] = Field(default_factory=dict)

    def to_geojson(self, extra_properties: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        properties = dict(self.properties)
        if extra_properties:
            properties.update(extra_properties)
        return {
            "type": "Feature",
            "geometry": self.geometry,
            "properties": properties,
        }


class GeocodeCandidate(BaseModel):
    display_name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    place_type: str
    bbox_north: float = Field(ge=-90, le=90)
    bbox_south: float = Field(ge=-90, le=90)
    bbox_east: float = Field(ge=-180, le=180)
    bbox_west: float = Field(ge=-180, le=180)

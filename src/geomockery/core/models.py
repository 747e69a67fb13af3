"""Pydantic return models for core computation functions."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep

from geomockery.models import AreaSource, BoundingBox, GeneratedFeature


class ResolvedConstraint(BaseModel):
    """Return type for resolve_constraint.

    ``polygon`` is None when features only need to fall inside ``bbox``.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    bbox: BoundingBox
    polygon: Optional[BaseGeometry] = None
    source: AreaSource = "viewport"
    warnings: list[str] = Field(default_factory=list)

    _prepared: Any = PrivateAttr(default=None)

    @property
    def prepared(self) -> Any:
        """Prepared copy of the polygon for repeated predicate calls."""
        if self.polygon is None:
            return None
        if self._prepared is None:
            self._prepared = prep(self.polygon)
        return self._prepared

    @property
    def is_constrained(self) -> bool:
        return self.polygon is not None


class BatchResult(BaseModel):
    """Return type for generate_batch."""
    features: list[GeneratedFeature] = Field(default_factory=list)
    success_count: int = Field(default=0, ge=0)
    fail_count: int = Field(default=0, ge=0)
    cancelled: bool = False
    warnings: list[str] = Field(default_factory=list)

    @property
    def attempted(self) -> int:
        return self.success_count + self.fail_count

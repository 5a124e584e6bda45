"""Shared Pydantic base models and geometry primitives."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (``model_dump(by_alias=True)``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """JSON-compatible dict using the stable camelCase schema."""
        return self.model_dump(by_alias=True, mode="json")


class Point(CamelModel):
    x: float = Field(default=0.0, description="X coordinate in mm")
    y: float = Field(default=0.0, description="Y coordinate in mm")


class BoundingBox(CamelModel):
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

"""Gauge and conversion schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import ConfigDict, Field, model_validator

from models.base import utcnow

from .base import BaseModelSchema, BaseSchema


class GaugeType(str, Enum):
    blocked = "blocked"
    unblocked = "unblocked"


class MeasurementUnit(str, Enum):
    stitches = "stitches"
    rows = "rows"
    cm = "cm"
    inches = "inches"


def _check_single_tool(needle_id, hook_id) -> None:
    if needle_id is not None and hook_id is not None:
        raise ValueError("A gauge cannot have both a needle and a hook")


# ===== Gauge =====


class GaugePhotoCreate(BaseSchema):
    file_path: str = Field(..., min_length=1)
    caption: str | None = Field(None, max_length=500)


class GaugePhoto(GaugePhotoCreate):
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)


class GaugeCreate(BaseSchema):
    project_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    gauge_type: GaugeType
    comments: str | None = Field(None, max_length=2000)
    yarn_id: UUID | None = None
    needle_id: UUID | None = None
    hook_id: UUID | None = None
    stitches: float = Field(..., ge=0)
    rows: float = Field(..., ge=0)
    width_cm: float = Field(..., ge=0)
    height_cm: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_tools(self) -> "GaugeCreate":
        _check_single_tool(self.needle_id, self.hook_id)
        return self


class GaugeUpdate(BaseSchema):
    model_config = ConfigDict(extra="forbid")

    project_id: UUID | None = None
    name: str | None = Field(None, min_length=1, max_length=200)
    gauge_type: GaugeType | None = None
    comments: str | None = Field(None, max_length=2000)
    yarn_id: UUID | None = None
    needle_id: UUID | None = None
    hook_id: UUID | None = None
    stitches: float | None = Field(None, ge=0)
    rows: float | None = Field(None, ge=0)
    width_cm: float | None = Field(None, ge=0)
    height_cm: float | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_update(self) -> "GaugeUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        _check_single_tool(self.needle_id, self.hook_id)
        return self


class GaugeResponse(BaseModelSchema):
    project_id: UUID
    name: str
    gauge_type: GaugeType
    comments: str | None = None
    yarn_id: UUID | None = None
    needle_id: UUID | None = None
    hook_id: UUID | None = None
    stitches: float
    rows: float
    width_cm: float
    height_cm: float
    photos: list[GaugePhoto] = Field(default_factory=list)

    stitches_per_cm: float | None = None
    rows_per_cm: float | None = None
    stitches_per_inch: float | None = None
    rows_per_inch: float | None = None


class GaugeFilter(BaseSchema):
    project_id: UUID | None = None
    gauge_type: GaugeType | None = None


# ===== Conversion =====


class ConversionCreate(BaseSchema):
    gauge_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    comments: str | None = Field(None, max_length=1000)
    from_value: float = Field(..., ge=0)
    from_unit: MeasurementUnit
    to_value: float = Field(..., ge=0)
    to_unit: MeasurementUnit


class ConversionUpdate(BaseSchema):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    comments: str | None = Field(None, max_length=1000)
    from_value: float | None = Field(None, ge=0)
    from_unit: MeasurementUnit | None = None
    to_value: float | None = Field(None, ge=0)
    to_unit: MeasurementUnit | None = None

    @model_validator(mode="after")
    def check_not_empty(self) -> "ConversionUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class ConversionData(BaseSchema):
    from_value: float
    from_unit: MeasurementUnit
    to_value: float
    to_unit: MeasurementUnit


class ConversionResponse(BaseModelSchema):
    project_id: UUID
    gauge_id: UUID
    name: str
    comments: str | None = None
    conversion_data: ConversionData


class ConversionFilter(BaseSchema):
    gauge_id: UUID | None = None
    project_id: UUID | None = None

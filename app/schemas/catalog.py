"""Catalog schemas: yarns, needles and hooks."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import ConfigDict, Field, field_validator, model_validator

from models.base import utcnow

from .base import DEFAULT_CURRENCY, BaseModelSchema, BaseSchema, Currency
from .project import ProjectStatus, ProjectType


class NeedleType(str, Enum):
    straight = "straight"
    circular = "circular"
    dpn = "dpn"


class _PartialUpdate(BaseSchema):
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class ProjectReference(BaseSchema):
    """A project that uses a catalog entry, as listed on its detail view."""

    id: UUID
    name: str
    project_type: ProjectType
    status: ProjectStatus
    start_date: date | None = None
    completion_date: date | None = None


class _UsageDetail(BaseSchema):
    # Filled in on detail views only
    project_count: int | None = None
    used_in_projects: list[ProjectReference] | None = None


# ===== Yarn =====


class YarnPhotoCreate(BaseSchema):
    file_path: str = Field(..., min_length=1)
    is_primary: bool = False
    caption: str | None = Field(None, max_length=500)
    taken_at: datetime | None = None

    @field_validator("file_path")
    @classmethod
    def strip_file_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("file_path cannot be empty")
        return v


class YarnPhoto(YarnPhotoCreate):
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)


class YarnCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    brand: str | None = Field(None, max_length=200)
    weight: str | None = Field(None, max_length=50)
    fiber_content: str | None = Field(None, max_length=200)
    color: str | None = Field(None, max_length=100)
    lot_number: str | None = Field(None, max_length=100)
    length_meters: float | None = Field(None, gt=0)
    weight_grams: float | None = Field(None, gt=0)
    price_per_unit: float | None = Field(None, ge=0)
    currency: Currency = DEFAULT_CURRENCY
    purchase_date: date | None = None
    purchase_location: str | None = Field(None, max_length=200)
    quantity_in_stash: float = Field(1, ge=0)
    notes: str | None = Field(None, max_length=2000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Yarn name cannot be empty or only whitespace")
        return v


class YarnUpdate(_PartialUpdate):
    name: str | None = Field(None, min_length=1, max_length=200)
    brand: str | None = Field(None, max_length=200)
    weight: str | None = Field(None, max_length=50)
    fiber_content: str | None = Field(None, max_length=200)
    color: str | None = Field(None, max_length=100)
    lot_number: str | None = Field(None, max_length=100)
    length_meters: float | None = Field(None, gt=0)
    weight_grams: float | None = Field(None, gt=0)
    price_per_unit: float | None = Field(None, ge=0)
    currency: Currency | None = None
    purchase_date: date | None = None
    purchase_location: str | None = Field(None, max_length=200)
    quantity_in_stash: float | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)


class YarnResponse(BaseModelSchema, _UsageDetail):
    name: str
    brand: str | None = None
    weight: str | None = None
    fiber_content: str | None = None
    color: str | None = None
    lot_number: str | None = None
    length_meters: float | None = None
    weight_grams: float | None = None
    price_per_unit: float | None = None
    currency: str
    purchase_date: date | None = None
    purchase_location: str | None = None
    quantity_in_stash: float
    notes: str | None = None
    photos: list[YarnPhoto] = Field(default_factory=list)


class YarnFilter(BaseSchema):
    brand: str | None = None
    weight: str | None = None
    color: str | None = None


# ===== Needle =====


class NeedleCreate(BaseSchema):
    size_mm: float = Field(..., gt=0)
    size_us: str | None = Field(None, max_length=20)
    type: NeedleType
    length_cm: float | None = Field(None, gt=0)
    material: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)
    currency: Currency = DEFAULT_CURRENCY
    notes: str | None = Field(None, max_length=2000)


class NeedleUpdate(_PartialUpdate):
    size_mm: float | None = Field(None, gt=0)
    size_us: str | None = Field(None, max_length=20)
    type: NeedleType | None = None
    length_cm: float | None = Field(None, gt=0)
    material: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)
    currency: Currency | None = None
    notes: str | None = Field(None, max_length=2000)


class NeedleResponse(BaseModelSchema, _UsageDetail):
    size_mm: float
    size_us: str | None = None
    type: NeedleType
    length_cm: float | None = None
    material: str | None = None
    brand: str | None = None
    price: float | None = None
    currency: str
    notes: str | None = None


class NeedleFilter(BaseSchema):
    type: NeedleType | None = None
    size_mm: float | None = None
    material: str | None = None
    brand: str | None = None


# ===== Hook =====


class HookCreate(BaseSchema):
    size_mm: float = Field(..., gt=0)
    size_us: str | None = Field(None, max_length=50)
    material: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)
    currency: Currency = DEFAULT_CURRENCY
    notes: str | None = Field(None, max_length=2000)


class HookUpdate(_PartialUpdate):
    size_mm: float | None = Field(None, gt=0)
    size_us: str | None = Field(None, max_length=50)
    material: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)
    currency: Currency | None = None
    notes: str | None = Field(None, max_length=2000)


class HookResponse(BaseModelSchema, _UsageDetail):
    size_mm: float
    size_us: str | None = None
    material: str | None = None
    brand: str | None = None
    price: float | None = None
    currency: str
    notes: str | None = None


class HookFilter(BaseSchema):
    size_mm: float | None = None
    material: str | None = None
    brand: str | None = None

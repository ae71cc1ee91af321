"""Project schemas for request/response serialization.

The ``*Create``/``*Update`` classes validate request bodies. ``Photo``,
``YarnUsage``, ``NeedleUsage``, ``HookUsage`` and ``AdditionalCost`` describe
the embedded items exactly as they are stored on the project row.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import ConfigDict, Field, field_validator, model_validator

from models.base import utcnow

from .base import DEFAULT_CURRENCY, BaseModelSchema, BaseSchema, Currency


class ProjectType(str, Enum):
    knitting = "knitting"
    crochet = "crochet"


class ProjectStatus(str, Enum):
    active = "active"
    completed = "completed"
    frogged = "frogged"
    hibernating = "hibernating"


class QuantityUnit(str, Enum):
    skeins = "skeins"
    balls = "balls"
    grams = "grams"
    meters = "meters"


class PhotoType(str, Enum):
    progress = "progress"
    finished = "finished"
    detail = "detail"
    inspiration = "inspiration"
    other = "other"


class CostCategory(str, Enum):
    notions = "notions"
    pattern = "pattern"
    tools = "tools"
    other = "other"


def _clean_name(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or only whitespace")
    return v


# ---------------------------------------------------------------------------
# Embedded items
# ---------------------------------------------------------------------------


class PhotoCreate(BaseSchema):
    """Schema for attaching photo metadata to a project."""

    file_path: str = Field(..., min_length=1)
    is_primary: bool = False
    photo_type: PhotoType | None = None
    caption: str | None = Field(None, max_length=500)
    taken_at: datetime | None = None

    @field_validator("file_path")
    @classmethod
    def strip_file_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("file_path cannot be empty")
        return v


class Photo(PhotoCreate):
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)


class YarnUsageCreate(BaseSchema):
    """Schema for attaching a yarn to a project."""

    yarn_id: UUID
    quantity_used: float = Field(..., gt=0)
    quantity_unit: QuantityUnit = QuantityUnit.skeins
    cost_per_unit: float | None = Field(None, ge=0)
    currency: Currency = DEFAULT_CURRENCY
    notes: str | None = Field(None, max_length=500)
    is_primary: bool = False


class YarnUsageUpdate(BaseSchema):
    """Patch for a yarn usage item; the yarn reference itself is fixed."""

    model_config = ConfigDict(extra="forbid")

    quantity_used: float | None = Field(None, gt=0)
    quantity_unit: QuantityUnit | None = None
    cost_per_unit: float | None = Field(None, ge=0)
    currency: Currency | None = None
    notes: str | None = Field(None, max_length=500)
    is_primary: bool | None = None


class YarnUsage(YarnUsageCreate):
    id: UUID = Field(default_factory=uuid4)


class NeedleUsageCreate(BaseSchema):
    """Schema for attaching a needle to a project."""

    needle_id: UUID
    is_primary: bool = False
    notes: str | None = Field(None, max_length=500)


class NeedleUsageUpdate(BaseSchema):
    model_config = ConfigDict(extra="forbid")

    is_primary: bool | None = None
    notes: str | None = Field(None, max_length=500)


class NeedleUsage(NeedleUsageCreate):
    id: UUID = Field(default_factory=uuid4)


class HookUsageCreate(BaseSchema):
    """Schema for attaching a hook to a project."""

    hook_id: UUID
    is_primary: bool = False
    notes: str | None = Field(None, max_length=500)


class HookUsageUpdate(BaseSchema):
    model_config = ConfigDict(extra="forbid")

    is_primary: bool | None = None
    notes: str | None = Field(None, max_length=500)


class HookUsage(HookUsageCreate):
    id: UUID = Field(default_factory=uuid4)


class CostCreate(BaseSchema):
    """Schema for recording a non-yarn cost (notions, pattern, tools...)."""

    description: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., gt=0)
    currency: Currency = DEFAULT_CURRENCY
    category: CostCategory | None = None
    purchase_date: date | None = None
    notes: str | None = Field(None, max_length=500)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty")
        return v


class AdditionalCost(CostCreate):
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


class ProjectBase(BaseSchema):
    """Base project schema with common fields."""

    name: str = Field(..., min_length=1, max_length=200)
    project_type: ProjectType
    status: ProjectStatus = ProjectStatus.active
    comments: str | None = Field(None, max_length=2000)
    start_date: date | None = None
    completion_date: date | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the project name."""
        return _clean_name(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.completion_date and self.completion_date < self.start_date:
            raise ValueError("completion_date cannot be before start_date")
        return self


class ProjectCreate(ProjectBase):
    """Schema for creating a new project, optionally with initial usage items."""

    yarns_used: list[YarnUsageCreate] = Field(default_factory=list)
    needles_used: list[NeedleUsageCreate] = Field(default_factory=list)
    hooks_used: list[HookUsageCreate] = Field(default_factory=list)


class ProjectUpdate(BaseSchema):
    """Schema for updating a project's scalar fields.

    Usage collections, photos and costs have their own operations; sending
    them here is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    project_type: ProjectType | None = None
    status: ProjectStatus | None = None
    comments: str | None = Field(None, max_length=2000)
    start_date: date | None = None
    completion_date: date | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the project name."""
        return _clean_name(v)

    @model_validator(mode="after")
    def check_not_empty(self) -> "ProjectUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class ProjectStatusUpdate(BaseSchema):
    """Schema for a status transition."""

    status: ProjectStatus
    completion_date: date | None = None


class ProjectFilter(BaseSchema):
    """Schema for filtering projects."""

    status: ProjectStatus | None = None
    project_type: ProjectType | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class YarnSummary(BaseSchema):
    id: UUID
    name: str
    brand: str | None = None
    weight: str | None = None
    color: str | None = None
    fiber_content: str | None = None


class NeedleSummary(BaseSchema):
    id: UUID
    size_mm: float
    size_us: str | None = None
    type: str
    material: str | None = None
    brand: str | None = None


class HookSummary(BaseSchema):
    id: UUID
    size_mm: float
    size_us: str | None = None
    material: str | None = None
    brand: str | None = None


class YarnUsageResponse(YarnUsage):
    yarn: YarnSummary | None = None


class NeedleUsageResponse(NeedleUsage):
    needle: NeedleSummary | None = None


class HookUsageResponse(HookUsage):
    hook: HookSummary | None = None


class ProjectResponse(BaseModelSchema):
    """Schema for project response with expanded references and derived costs."""

    name: str
    project_type: ProjectType
    status: ProjectStatus
    comments: str | None = None
    start_date: date | None = None
    completion_date: date | None = None
    version: int

    photos: list[Photo] = Field(default_factory=list)
    yarns_used: list[YarnUsageResponse] = Field(default_factory=list)
    needles_used: list[NeedleUsageResponse] = Field(default_factory=list)
    hooks_used: list[HookUsageResponse] = Field(default_factory=list)
    additional_costs: list[AdditionalCost] = Field(default_factory=list)

    # Computed fields
    total_yarn_cost: float = 0.0
    total_additional_cost: float = 0.0
    total_project_cost: float = 0.0


class YarnCostLine(BaseSchema):
    usage_id: UUID
    yarn_id: UUID
    yarn_name: str | None = None
    quantity: float
    unit: QuantityUnit
    cost_per_unit: float | None = None
    currency: str
    total: float


class AdditionalCostLine(BaseSchema):
    cost_id: UUID
    description: str
    amount: float
    currency: str
    category: CostCategory | None = None
    purchase_date: date | None = None


class CostBreakdown(BaseSchema):
    yarns: list[YarnCostLine] = Field(default_factory=list)
    additional: list[AdditionalCostLine] = Field(default_factory=list)


class CostSummary(BaseSchema):
    """Derived, never stored, cost report for a project.

    ``currency`` is the first yarn line's currency (or the default); amounts
    in other currencies are summed without conversion, so ``totals_by_currency``
    is the reliable figure when a project mixes currencies.
    """

    project_id: UUID
    yarn_cost: float
    additional_cost: float
    total_cost: float
    currency: str
    totals_by_currency: dict[str, float] = Field(default_factory=dict)
    breakdown: CostBreakdown

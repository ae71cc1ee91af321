"""Base schemas for the application."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints

from app.core.config import settings

# ISO 4217-style code, normalized to upper case
Currency = Annotated[
    str, StringConstraints(strip_whitespace=True, to_upper=True, pattern=r"^[A-Za-z]{3}$")
]

DEFAULT_CURRENCY = settings.default_currency


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class BaseModelSchema(BaseSchema):
    """Base schema for database models."""
    id: UUID
    created_at: datetime
    updated_at: datetime


class ResponseSchema(BaseSchema):
    """Standard API response envelope."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None
    pagination: Optional[dict] = None


def to_column_values(data: BaseModel, exclude_unset: bool = False) -> dict[str, Any]:
    """Dump a schema for assignment to ORM columns (enum members become their values)."""
    return {
        field: value.value if isinstance(value, Enum) else value
        for field, value in data.model_dump(exclude_unset=exclude_unset).items()
    }

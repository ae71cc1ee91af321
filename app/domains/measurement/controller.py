"""Gauge and conversion API controllers."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_pagination
from app.database import get_db
from app.domains.measurement.service import ConversionService, GaugeService
from app.schemas.base import ResponseSchema
from app.schemas.measurement import (
    ConversionCreate,
    ConversionFilter,
    ConversionResponse,
    ConversionUpdate,
    GaugeCreate,
    GaugeFilter,
    GaugePhotoCreate,
    GaugeResponse,
    GaugeType,
    GaugeUpdate,
)
from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)

gauge_router = APIRouter(prefix="/api/gauges", tags=["gauges"])
conversion_router = APIRouter(prefix="/api/conversions", tags=["conversions"])


def _gauge_data(gauge) -> dict:
    return GaugeResponse.model_validate(gauge).model_dump(mode="json")


def _conversion_data(conversion) -> dict:
    return ConversionResponse.model_validate(conversion).model_dump(mode="json")


# ===== Gauges =====


@gauge_router.get("", response_model=ResponseSchema)
async def get_gauges(
    project_id: Optional[UUID] = Query(None),
    gauge_type: Optional[GaugeType] = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of gauges, newest first."""

    filters = GaugeFilter(project_id=project_id, gauge_type=gauge_type)
    result = await GaugeService(db).list(filters.model_dump(exclude_none=True), pagination)

    return ResponseSchema(
        success=True,
        data=[_gauge_data(gauge) for gauge in result["data"]],
        pagination=result["pagination"],
    )


@gauge_router.post("", response_model=ResponseSchema, status_code=201)
async def create_gauge(gauge_data: GaugeCreate, db: AsyncSession = Depends(get_db)):
    gauge = await GaugeService(db).create(gauge_data)

    return ResponseSchema(success=True, message="Gauge created successfully", data=_gauge_data(gauge))


@gauge_router.get("/{gauge_id}", response_model=ResponseSchema)
async def get_gauge(
    gauge_id: UUID = Path(..., description="Gauge ID"),
    db: AsyncSession = Depends(get_db),
):
    gauge = await GaugeService(db).get(gauge_id)

    return ResponseSchema(success=True, data=_gauge_data(gauge))


@gauge_router.put("/{gauge_id}", response_model=ResponseSchema)
async def update_gauge(
    gauge_id: UUID = Path(..., description="Gauge ID"),
    gauge_data: GaugeUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    gauge = await GaugeService(db).update(gauge_id, gauge_data)

    return ResponseSchema(success=True, message="Gauge updated successfully", data=_gauge_data(gauge))


@gauge_router.delete("/{gauge_id}", response_model=ResponseSchema)
async def delete_gauge(
    gauge_id: UUID = Path(..., description="Gauge ID"),
    db: AsyncSession = Depends(get_db),
):
    await GaugeService(db).delete(gauge_id)

    return ResponseSchema(success=True, message="Gauge deleted successfully")


@gauge_router.post("/{gauge_id}/photos", response_model=ResponseSchema, status_code=201)
async def add_gauge_photo(
    gauge_id: UUID = Path(..., description="Gauge ID"),
    photo_data: GaugePhotoCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    gauge = await GaugeService(db).add_photo(gauge_id, photo_data)

    return ResponseSchema(success=True, message="Photo added successfully", data=_gauge_data(gauge))


# ===== Conversions =====


@conversion_router.get("", response_model=ResponseSchema)
async def get_conversions(
    gauge_id: Optional[UUID] = Query(None),
    project_id: Optional[UUID] = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of conversions, newest first."""

    filters = ConversionFilter(gauge_id=gauge_id, project_id=project_id)
    result = await ConversionService(db).list(filters.model_dump(exclude_none=True), pagination)

    return ResponseSchema(
        success=True,
        data=[_conversion_data(conversion) for conversion in result["data"]],
        pagination=result["pagination"],
    )


@conversion_router.post("", response_model=ResponseSchema, status_code=201)
async def create_conversion(conversion_data: ConversionCreate, db: AsyncSession = Depends(get_db)):
    conversion = await ConversionService(db).create(conversion_data)

    return ResponseSchema(
        success=True,
        message="Conversion created successfully",
        data=_conversion_data(conversion),
    )


@conversion_router.get("/{conversion_id}", response_model=ResponseSchema)
async def get_conversion(
    conversion_id: UUID = Path(..., description="Conversion ID"),
    db: AsyncSession = Depends(get_db),
):
    conversion = await ConversionService(db).get(conversion_id)

    return ResponseSchema(success=True, data=_conversion_data(conversion))


@conversion_router.put("/{conversion_id}", response_model=ResponseSchema)
async def update_conversion(
    conversion_id: UUID = Path(..., description="Conversion ID"),
    conversion_data: ConversionUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    conversion = await ConversionService(db).update(conversion_id, conversion_data)

    return ResponseSchema(
        success=True,
        message="Conversion updated successfully",
        data=_conversion_data(conversion),
    )


@conversion_router.delete("/{conversion_id}", response_model=ResponseSchema)
async def delete_conversion(
    conversion_id: UUID = Path(..., description="Conversion ID"),
    db: AsyncSession = Depends(get_db),
):
    await ConversionService(db).delete(conversion_id)

    return ResponseSchema(success=True, message="Conversion deleted successfully")

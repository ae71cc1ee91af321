"""Gauge and conversion services.

Gauges and conversions reference projects and catalog entries; unlike project
usage items, every reference is checked for existence before it is stored.
"""

import logging
from typing import Any, Dict, Mapping, Optional
from uuid import UUID

from sqlalchemy import delete, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import NotFoundError, ValidationError
from app.schemas.base import to_column_values
from app.schemas.measurement import (
    ConversionCreate,
    ConversionData,
    ConversionUpdate,
    GaugeCreate,
    GaugePhoto,
    GaugePhotoCreate,
    GaugeUpdate,
)
from app.shared.pagination import PaginationParams, paginate
from app.shared.query_builder import build_filters
from models import Conversion, Gauge, Hook, Needle, Project, Yarn

logger = logging.getLogger(__name__)

GAUGE_REFERENCES = (
    ("project_id", Project, "Project"),
    ("yarn_id", Yarn, "Yarn"),
    ("needle_id", Needle, "Needle"),
    ("hook_id", Hook, "Hook"),
)


class GaugeService:
    """Service class for gauge swatches."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        stmt = select(Gauge).where(*build_filters(Gauge, filters))
        return await paginate(
            self.db, stmt, pagination or PaginationParams(), order_by=desc(Gauge.created_at)
        )

    async def get(self, gauge_id: UUID) -> Gauge:
        gauge = await self.db.get(Gauge, gauge_id)
        if not gauge:
            raise NotFoundError("Gauge")
        return gauge

    async def create(self, gauge_data: GaugeCreate) -> Gauge:
        values = to_column_values(gauge_data)
        await self._ensure_references_exist(values)

        gauge = Gauge(**values, photos=[])
        return await self._save(gauge, "create")

    async def update(self, gauge_id: UUID, gauge_data: GaugeUpdate) -> Gauge:
        gauge = await self.get(gauge_id)
        changes = to_column_values(gauge_data, exclude_unset=True)
        if changes.get("project_id") is None:
            changes.pop("project_id", None)

        needle_id = changes.get("needle_id", gauge.needle_id)
        hook_id = changes.get("hook_id", gauge.hook_id)
        if needle_id is not None and hook_id is not None:
            raise ValidationError("A gauge cannot have both a needle and a hook")

        await self._ensure_references_exist(changes)
        for field, value in changes.items():
            if value is None and field in ("name", "gauge_type", "stitches", "rows", "width_cm", "height_cm"):
                continue
            setattr(gauge, field, value)
        return await self._save(gauge, "update")

    async def delete(self, gauge_id: UUID) -> bool:
        """Delete a gauge together with the conversions derived from it."""
        gauge = await self.get(gauge_id)
        try:
            await self.db.execute(delete(Conversion).where(Conversion.gauge_id == gauge_id))
            await self.db.delete(gauge)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to delete gauge %s", gauge_id)
            raise
        logger.info("Deleted gauge %s", gauge_id)
        return True

    async def add_photo(self, gauge_id: UUID, photo_data: GaugePhotoCreate) -> Gauge:
        gauge = await self.get(gauge_id)
        photo = GaugePhoto(**photo_data.model_dump()).model_dump(mode="json")
        gauge.photos = list(gauge.photos or []) + [photo]
        return await self._save(gauge, "add photo to")

    async def _ensure_references_exist(self, values: Mapping[str, Any]) -> None:
        for field, model, label in GAUGE_REFERENCES:
            ref = values.get(field)
            if ref is not None and await self.db.get(model, ref) is None:
                raise NotFoundError(label)

    async def _save(self, gauge: Gauge, action: str) -> Gauge:
        try:
            self.db.add(gauge)
            await self.db.commit()
            await self.db.refresh(gauge)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to %s gauge", action)
            raise
        logger.info("Gauge %s: %s", gauge.id, action)
        return gauge


class ConversionService:
    """Service class for gauge-based conversions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        stmt = select(Conversion).where(*build_filters(Conversion, filters))
        return await paginate(
            self.db, stmt, pagination or PaginationParams(), order_by=desc(Conversion.created_at)
        )

    async def get(self, conversion_id: UUID) -> Conversion:
        conversion = await self.db.get(Conversion, conversion_id)
        if not conversion:
            raise NotFoundError("Conversion")
        return conversion

    async def create(self, conversion_data: ConversionCreate) -> Conversion:
        """Create a conversion; it belongs to the project of its gauge."""
        gauge = await self.db.get(Gauge, conversion_data.gauge_id)
        if not gauge:
            raise NotFoundError("Gauge")

        data = ConversionData.model_validate(conversion_data.model_dump())
        conversion = Conversion(
            project_id=gauge.project_id,
            gauge_id=gauge.id,
            name=conversion_data.name,
            comments=conversion_data.comments,
            conversion_data=data.model_dump(mode="json"),
        )
        try:
            self.db.add(conversion)
            await self.db.commit()
            await self.db.refresh(conversion)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create conversion for gauge %s", gauge.id)
            raise
        logger.info("Created conversion %s for gauge %s", conversion.id, gauge.id)
        return conversion

    async def update(self, conversion_id: UUID, conversion_data: ConversionUpdate) -> Conversion:
        conversion = await self.get(conversion_id)
        changes = conversion_data.model_dump(exclude_unset=True, mode="json")

        if "name" in changes and changes["name"] is not None:
            conversion.name = changes.pop("name")
        else:
            changes.pop("name", None)
        if "comments" in changes:
            conversion.comments = changes.pop("comments")

        data_changes = {field: value for field, value in changes.items() if value is not None}
        if data_changes:
            merged = {**(conversion.conversion_data or {}), **data_changes}
            conversion.conversion_data = ConversionData.model_validate(merged).model_dump(mode="json")

        try:
            await self.db.commit()
            await self.db.refresh(conversion)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to update conversion %s", conversion_id)
            raise
        logger.info("Updated conversion %s", conversion_id)
        return conversion

    async def delete(self, conversion_id: UUID) -> bool:
        conversion = await self.get(conversion_id)
        try:
            await self.db.delete(conversion)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to delete conversion %s", conversion_id)
            raise
        logger.info("Deleted conversion %s", conversion_id)
        return True

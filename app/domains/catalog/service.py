"""Catalog service: yarns, needles and hooks.

The three catalogs share the same plain CRUD behaviour, so one service class
is parameterized with the project usage kind that points at the catalog.
Projects reference catalog entries from their JSON usage lists, which is
where the usage lookups search.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import String, cast, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.domains.project.usage import HOOK, NEEDLE, YARN, UsageKind, has_reference, reference_ids
from app.exceptions.base import NotFoundError
from app.schemas.base import to_column_values
from app.schemas.catalog import YarnPhoto, YarnPhotoCreate
from app.shared.pagination import PaginationParams, paginate
from app.shared.query_builder import build_filters
from models import Project, Yarn

logger = logging.getLogger(__name__)


class CatalogService:
    """Service class for one reference catalog.

    ``kind`` is the usage collection through which projects point at this
    catalog; it supplies the ORM model, the display label and where to look
    for references on a project.
    """

    def __init__(self, db: AsyncSession, kind: UsageKind):
        self.db = db
        self.kind = kind
        self.model = kind.model
        self.label = kind.label

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        """Get a page of entries, newest first."""
        stmt = select(self.model).where(*build_filters(self.model, filters))
        return await paginate(
            self.db,
            stmt,
            pagination or PaginationParams(),
            order_by=[desc(self.model.updated_at), desc(self.model.created_at)],
        )

    async def get(self, entity_id: UUID):
        entity = await self.db.get(self.model, entity_id)
        if not entity:
            raise NotFoundError(self.label)
        return entity

    async def create(self, data: BaseModel):
        entity = self.model(**to_column_values(data))
        try:
            self.db.add(entity)
            await self.db.commit()
            await self.db.refresh(entity)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create %s", self.label.lower())
            raise
        logger.info("Created %s %s", self.label.lower(), entity.id)
        return entity

    async def update(self, entity_id: UUID, data: BaseModel):
        entity = await self.get(entity_id)

        columns = self.model.__table__.columns
        for field, value in to_column_values(data, exclude_unset=True).items():
            if value is None and not columns[field].nullable:
                continue
            setattr(entity, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(entity)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to update %s %s", self.label.lower(), entity_id)
            raise
        logger.info("Updated %s %s", self.label.lower(), entity_id)
        return entity

    async def delete(self, entity_id: UUID) -> bool:
        """Delete an entry. Projects keep their usage items pointing at it."""
        entity = await self.get(entity_id)
        try:
            await self.db.delete(entity)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to delete %s %s", self.label.lower(), entity_id)
            raise
        logger.info("Deleted %s %s", self.label.lower(), entity_id)
        return True

    # ------------------------------------------------------------------
    # Project usage
    # ------------------------------------------------------------------

    async def projects_using(self, entity_id: UUID) -> List[Project]:
        """Projects whose usage collection references this entry, most recent first."""
        stmt = (
            select(Project)
            .where(self._references(entity_id))
            .order_by(desc(Project.updated_at), desc(Project.created_at))
        )
        result = await self.db.execute(stmt)
        return [
            project
            for project in result.scalars().all()
            if has_reference(self.kind, getattr(project, self.kind.collection) or [], entity_id)
        ]

    async def project_counts(self, entity_ids: Iterable[UUID]) -> Dict[str, int]:
        """Number of projects using each of ``entity_ids``, in a single query."""
        counts = {str(entity_id): 0 for entity_id in entity_ids}
        if not counts:
            return counts

        collection = getattr(Project, self.kind.collection)
        stmt = select(collection).where(or_(*(self._references(ref) for ref in counts)))
        result = await self.db.execute(stmt)
        for items in result.scalars().all():
            for ref in set(reference_ids(self.kind, items or [])):
                if ref in counts:
                    counts[ref] += 1
        return counts

    def _references(self, entity_id: UUID | str):
        # The reference sits inside a JSON list, so match on its serialized id
        collection = getattr(Project, self.kind.collection)
        return cast(collection, String).like(f'%"{entity_id}"%')


class YarnService(CatalogService):
    """Yarn stash, with photos."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, YARN)

    async def add_photo(self, yarn_id: UUID, photo_data: YarnPhotoCreate) -> Yarn:
        yarn = await self.get(yarn_id)
        photo = YarnPhoto(**photo_data.model_dump()).model_dump(mode="json")
        yarn.photos = list(yarn.photos or []) + [photo]

        try:
            await self.db.commit()
            await self.db.refresh(yarn)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to add photo to yarn %s", yarn_id)
            raise
        logger.info("Added photo %s to yarn %s", photo["id"], yarn_id)
        return yarn


class NeedleService(CatalogService):
    def __init__(self, db: AsyncSession):
        super().__init__(db, NEEDLE)


class HookService(CatalogService):
    def __init__(self, db: AsyncSession):
        super().__init__(db, HOOK)

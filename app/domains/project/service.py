"""Project service layer with business logic.

``ProjectService`` is the only writer of project rows. Every mutation is a
read-modify-write of the whole aggregate: load the row, validate and build the
new embedded collections in memory, then commit. The row's ``version_id`` makes
the commit fail if another request wrote the project in between; the whole
cycle is then repeated a bounded number of times.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.domains.project.costs import build_cost_summary, compute_totals
from app.domains.project.usage import (
    CLEARABLE_FIELDS,
    HOOK,
    NEEDLE,
    USAGE_KINDS,
    YARN,
    UsageKind,
    append_usage,
    find_usage,
    has_reference,
    patch_usage,
    reference_ids,
    remove_usage,
    validate_usage_items,
)
from app.exceptions.base import ConcurrencyConflictError, NotFoundError, ValidationError
from app.exceptions.project import (
    DuplicateUsageError,
    ProjectNotFoundError,
    UsageNotFoundError,
)
from app.schemas.project import (
    AdditionalCost,
    CostCreate,
    CostSummary,
    HookUsageCreate,
    HookUsageUpdate,
    NeedleUsageCreate,
    NeedleUsageUpdate,
    Photo,
    PhotoCreate,
    ProjectBase,
    ProjectCreate,
    ProjectFilter,
    ProjectResponse,
    ProjectStatus,
    ProjectStatusUpdate,
    ProjectUpdate,
    YarnUsageCreate,
    YarnUsageUpdate,
)
from app.shared.pagination import PaginationParams, paginate
from app.shared.query_builder import build_filters
from models import Project, utcnow

logger = logging.getLogger(__name__)

SCALAR_FIELDS = (
    "name",
    "project_type",
    "status",
    "comments",
    "start_date",
    "completion_date",
)

# Scalars that can never be cleared
REQUIRED_SCALARS = frozenset({"name", "project_type", "status"})

Mutator = Callable[[Project], Awaitable[None]]


class ProjectService:
    """Service class for the project aggregate."""

    def __init__(self, db: AsyncSession, max_retries: Optional[int] = None):
        self.db = db
        self.max_retries = settings.max_write_retries if max_retries is None else max_retries

    # ------------------------------------------------------------------
    # Project lifecycle
    # ------------------------------------------------------------------

    async def create_project(self, project_data: ProjectCreate) -> ProjectResponse:
        """Create a new project, validating any initial usage items."""

        usage_lists: Dict[str, list] = {}
        for kind in USAGE_KINDS:
            items = [
                kind.item_schema(**item.model_dump()).model_dump(mode="json")
                for item in getattr(project_data, kind.collection)
            ]
            try:
                validate_usage_items(kind, items)
            except ValidationError as e:
                logger.warning("Rejected new project %r: %s", project_data.name, e.message)
                raise
            usage_lists[kind.collection] = items

        for kind in USAGE_KINDS:
            await self._ensure_references_exist(kind, reference_ids(kind, usage_lists[kind.collection]))

        now = utcnow()
        project = Project(
            name=project_data.name,
            project_type=project_data.project_type.value,
            status=project_data.status.value,
            comments=project_data.comments,
            start_date=project_data.start_date,
            completion_date=project_data.completion_date,
            photos=[],
            additional_costs=[],
            created_at=now,
            updated_at=now,
            **usage_lists,
        )

        try:
            self.db.add(project)
            await self.db.commit()
            await self.db.refresh(project)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create project %r", project_data.name)
            raise

        logger.info("Created project %s (%s)", project.id, project.project_type)
        return (await self._to_responses([project]))[0]

    async def get_projects(
        self,
        filters: Optional[ProjectFilter | Mapping[str, Any]] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        """Get a page of projects, most recently updated first."""

        if isinstance(filters, ProjectFilter):
            filters = filters.model_dump(exclude_none=True)
        pagination = pagination or PaginationParams()

        stmt = select(Project).where(*build_filters(Project, filters))
        result = await paginate(
            self.db,
            stmt,
            pagination,
            order_by=[desc(Project.updated_at), desc(Project.created_at)],
        )

        return {
            "data": await self._to_responses(result["data"]),
            "pagination": result["pagination"],
        }

    async def get_project(self, project_id: UUID) -> ProjectResponse:
        project = await self._get_project_or_404(project_id)
        return (await self._to_responses([project]))[0]

    async def update_project(self, project_id: UUID, project_data: ProjectUpdate) -> ProjectResponse:
        """Partially update scalar fields; the merged document is re-validated."""

        changes = {
            field: value
            for field, value in project_data.model_dump(exclude_unset=True).items()
            if field in SCALAR_FIELDS and not (value is None and field in REQUIRED_SCALARS)
        }

        async def mutate(project: Project) -> None:
            merged = {field: getattr(project, field) for field in SCALAR_FIELDS}
            merged.update(changes)
            try:
                validated = ProjectBase.model_validate(merged)
            except PydanticValidationError as e:
                raise ValidationError(
                    "Project update is invalid", details={"errors": _error_messages(e)}
                ) from e
            for field in changes:
                value = getattr(validated, field)
                setattr(project, field, value.value if hasattr(value, "value") else value)

        project = await self._apply(project_id, mutate)
        logger.info("Updated project %s fields %s", project_id, sorted(changes))
        return (await self._to_responses([project]))[0]

    async def update_status(self, project_id: UUID, status_data: ProjectStatusUpdate) -> ProjectResponse:
        """Move a project to any status; completing it may record the completion date."""

        async def mutate(project: Project) -> None:
            if status_data.status == ProjectStatus.completed and status_data.completion_date:
                if project.start_date and status_data.completion_date < project.start_date:
                    logger.warning(
                        "Rejected completion date %s before start %s on project %s",
                        status_data.completion_date,
                        project.start_date,
                        project_id,
                    )
                    raise ValidationError(
                        "completion_date cannot be before start_date",
                        details={
                            "start_date": project.start_date.isoformat(),
                            "completion_date": status_data.completion_date.isoformat(),
                        },
                    )
                project.completion_date = status_data.completion_date
            project.status = status_data.status.value

        project = await self._apply(project_id, mutate)
        logger.info("Project %s status -> %s", project_id, status_data.status.value)
        return (await self._to_responses([project]))[0]

    async def delete_project(self, project_id: UUID) -> bool:
        """Hard-delete a project. Catalog entities and gauges are left alone."""

        async def mutate(project: Project) -> None:
            await self.db.delete(project)

        await self._apply(project_id, mutate, touch=False)
        logger.info("Deleted project %s", project_id)
        return True

    # ------------------------------------------------------------------
    # Photos and costs
    # ------------------------------------------------------------------

    async def add_photo(self, project_id: UUID, photo_data: PhotoCreate) -> ProjectResponse:
        photo = Photo(**photo_data.model_dump()).model_dump(mode="json")

        async def mutate(project: Project) -> None:
            project.photos = list(project.photos or []) + [photo]

        project = await self._apply(project_id, mutate)
        logger.info("Added photo %s to project %s", photo["id"], project_id)
        return (await self._to_responses([project]))[0]

    async def add_cost(self, project_id: UUID, cost_data: CostCreate) -> ProjectResponse:
        cost = AdditionalCost(**cost_data.model_dump()).model_dump(mode="json")

        async def mutate(project: Project) -> None:
            project.additional_costs = list(project.additional_costs or []) + [cost]

        project = await self._apply(project_id, mutate)
        logger.info("Added cost %s (%s %s) to project %s", cost["id"], cost["amount"], cost["currency"], project_id)
        return (await self._to_responses([project]))[0]

    async def get_cost_summary(self, project_id: UUID) -> CostSummary:
        project = await self._get_project_or_404(project_id)
        summaries = await self._load_summaries(YARN, reference_ids(YARN, project.yarns_used or []))
        yarn_names = {ref: summary.name for ref, summary in summaries.items()}
        return build_cost_summary(project, yarn_names)

    # ------------------------------------------------------------------
    # Usage collections
    # ------------------------------------------------------------------

    async def add_usage(self, kind: UsageKind, project_id: UUID, usage_data) -> ProjectResponse:
        """Attach a catalog entity; a primary newcomer demotes its siblings."""

        new_item = kind.item_schema(**usage_data.model_dump()).model_dump(mode="json")
        ref_id = new_item[kind.ref_field]

        async def mutate(project: Project) -> None:
            items = list(getattr(project, kind.collection) or [])
            if has_reference(kind, items, ref_id):
                logger.warning("%s %s already on project %s", kind.label, ref_id, project_id)
                raise DuplicateUsageError(kind.label)
            await self._ensure_references_exist(kind, [ref_id])
            setattr(project, kind.collection, append_usage(kind, items, new_item))

        project = await self._apply(project_id, mutate)
        logger.info("Added %s usage %s (%s) to project %s", kind.name, new_item["id"], ref_id, project_id)
        return (await self._to_responses([project]))[0]

    async def update_usage(
        self, kind: UsageKind, project_id: UUID, usage_id: UUID, usage_data
    ) -> ProjectResponse:
        """Merge a patch onto one usage item in place."""

        changes = {
            field: value
            for field, value in usage_data.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or field in CLEARABLE_FIELDS
        }

        async def mutate(project: Project) -> None:
            items = list(getattr(project, kind.collection) or [])
            index = find_usage(items, usage_id)
            if index is None:
                raise UsageNotFoundError(kind.label)
            setattr(project, kind.collection, patch_usage(kind, items, index, changes))

        project = await self._apply(project_id, mutate)
        logger.info("Updated %s usage %s on project %s", kind.name, usage_id, project_id)
        return (await self._to_responses([project]))[0]

    async def remove_usage(self, kind: UsageKind, project_id: UUID, usage_id: UUID) -> ProjectResponse:
        """Detach one usage item; the catalog entity itself is untouched."""

        async def mutate(project: Project) -> None:
            items = list(getattr(project, kind.collection) or [])
            index = find_usage(items, usage_id)
            if index is None:
                raise UsageNotFoundError(kind.label)
            setattr(project, kind.collection, remove_usage(items, index))

        project = await self._apply(project_id, mutate)
        logger.info("Removed %s usage %s from project %s", kind.name, usage_id, project_id)
        return (await self._to_responses([project]))[0]

    async def add_yarn(self, project_id: UUID, data: YarnUsageCreate) -> ProjectResponse:
        return await self.add_usage(YARN, project_id, data)

    async def update_yarn(self, project_id: UUID, usage_id: UUID, data: YarnUsageUpdate) -> ProjectResponse:
        return await self.update_usage(YARN, project_id, usage_id, data)

    async def remove_yarn(self, project_id: UUID, usage_id: UUID) -> ProjectResponse:
        return await self.remove_usage(YARN, project_id, usage_id)

    async def add_needle(self, project_id: UUID, data: NeedleUsageCreate) -> ProjectResponse:
        return await self.add_usage(NEEDLE, project_id, data)

    async def update_needle(self, project_id: UUID, usage_id: UUID, data: NeedleUsageUpdate) -> ProjectResponse:
        return await self.update_usage(NEEDLE, project_id, usage_id, data)

    async def remove_needle(self, project_id: UUID, usage_id: UUID) -> ProjectResponse:
        return await self.remove_usage(NEEDLE, project_id, usage_id)

    async def add_hook(self, project_id: UUID, data: HookUsageCreate) -> ProjectResponse:
        return await self.add_usage(HOOK, project_id, data)

    async def update_hook(self, project_id: UUID, usage_id: UUID, data: HookUsageUpdate) -> ProjectResponse:
        return await self.update_usage(HOOK, project_id, usage_id, data)

    async def remove_hook(self, project_id: UUID, usage_id: UUID) -> ProjectResponse:
        return await self.remove_usage(HOOK, project_id, usage_id)

    # Private helper methods
    async def _get_project(self, project_id: UUID) -> Optional[Project]:
        """Load a project, always refreshing it from the database."""
        stmt = (
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_project_or_404(self, project_id: UUID) -> Project:
        project = await self._get_project(project_id)
        if not project:
            raise ProjectNotFoundError()
        return project

    async def _apply(self, project_id: UUID, mutate: Mutator, touch: bool = True) -> Project:
        """
        Run one read-modify-write cycle against a project.

        ``mutate`` validates and changes the loaded row; when it raises, nothing
        has been written. A commit rejected by the version check is retried
        from a fresh read up to ``max_retries`` times.
        """
        attempt = 0
        while True:
            project = await self._get_project_or_404(project_id)
            await mutate(project)
            if touch:
                project.updated_at = utcnow()
            try:
                await self.db.commit()
            except StaleDataError as e:
                await self.db.rollback()
                attempt += 1
                if attempt > self.max_retries:
                    logger.warning(
                        "Giving up on project %s after %d concurrent modification(s)",
                        project_id,
                        attempt,
                    )
                    raise ConcurrencyConflictError(details={"project_id": str(project_id)}) from e
                logger.warning(
                    "Concurrent modification of project %s, retrying (%d/%d)",
                    project_id,
                    attempt,
                    self.max_retries,
                )
                continue
            except SQLAlchemyError:
                await self.db.rollback()
                logger.exception("Failed to save project %s", project_id)
                raise
            return project

    async def _load_summaries(self, kind: UsageKind, ids: Iterable[str]) -> Dict[str, Any]:
        """Summary schemas of the catalog entities in ``ids`` that still exist."""
        unique_ids = {UUID(str(ref)) for ref in ids}
        if not unique_ids:
            return {}
        stmt = select(kind.model).where(kind.model.id.in_(unique_ids))
        result = await self.db.execute(stmt)
        return {
            str(entity.id): kind.summary_schema.model_validate(entity)
            for entity in result.scalars().all()
        }

    async def _ensure_references_exist(self, kind: UsageKind, ids: Iterable[str]) -> None:
        unique_ids = {UUID(str(ref)) for ref in ids}
        if not unique_ids:
            return
        stmt = select(func.count(kind.model.id)).where(kind.model.id.in_(unique_ids))
        result = await self.db.execute(stmt)
        found = result.scalar() or 0
        if found != len(unique_ids):
            existing = await self._load_summaries(kind, [str(ref) for ref in unique_ids])
            missing = sorted(str(ref) for ref in unique_ids if str(ref) not in existing)
            logger.warning("Unknown %s reference(s): %s", kind.name, ", ".join(missing))
            raise NotFoundError(kind.label, details={"missing": missing})

    async def _to_responses(self, projects: list[Project]) -> list[ProjectResponse]:
        """Serialize projects with their usage references expanded."""
        summaries = {}
        for kind in USAGE_KINDS:
            ids = [
                ref
                for project in projects
                for ref in reference_ids(kind, getattr(project, kind.collection) or [])
            ]
            summaries[kind.name] = await self._load_summaries(kind, ids)

        responses = []
        for project in projects:
            data = {
                "id": project.id,
                "created_at": project.created_at,
                "updated_at": project.updated_at,
                "name": project.name,
                "project_type": project.project_type,
                "status": project.status,
                "comments": project.comments,
                "start_date": project.start_date,
                "completion_date": project.completion_date,
                "version": project.version_id,
                "photos": project.photos or [],
                "additional_costs": project.additional_costs or [],
                **compute_totals(project),
            }
            for kind in USAGE_KINDS:
                data[kind.collection] = [
                    {**item, kind.expand_key: summaries[kind.name].get(str(item[kind.ref_field]))}
                    for item in getattr(project, kind.collection) or []
                ]
            responses.append(ProjectResponse.model_validate(data))
        return responses


def _error_messages(error: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in error.errors()
    ]

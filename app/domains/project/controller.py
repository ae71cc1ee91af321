"""Project API controller with FastAPI endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_pagination
from app.database import get_db
from app.domains.project.service import ProjectService
from app.schemas.base import ResponseSchema
from app.schemas.project import (
    CostCreate,
    HookUsageCreate,
    HookUsageUpdate,
    NeedleUsageCreate,
    NeedleUsageUpdate,
    PhotoCreate,
    ProjectCreate,
    ProjectFilter,
    ProjectStatus,
    ProjectStatusUpdate,
    ProjectType,
    ProjectUpdate,
    YarnUsageCreate,
    YarnUsageUpdate,
)
from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
)


@router.get("", response_model=ResponseSchema)
async def get_projects(
    status: Optional[ProjectStatus] = Query(None),
    project_type: Optional[ProjectType] = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of projects with optional filters."""

    filters = ProjectFilter(status=status, project_type=project_type)

    service = ProjectService(db)
    result = await service.get_projects(filters=filters, pagination=pagination)

    return ResponseSchema(
        success=True,
        data=[project.model_dump(mode="json") for project in result["data"]],
        pagination=result["pagination"],
    )


@router.post("", response_model=ResponseSchema, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new project."""

    service = ProjectService(db)
    project = await service.create_project(project_data)

    return ResponseSchema(
        success=True,
        message="Project created successfully",
        data=project.model_dump(mode="json"),
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: UUID = Path(..., description="Project ID"),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific project by ID."""

    service = ProjectService(db)
    project = await service.get_project(project_id)

    return ResponseSchema(success=True, data=project.model_dump(mode="json"))


@router.put("/{project_id}", response_model=ResponseSchema)
async def update_project(
    project_id: UUID = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Update a project's scalar fields."""

    service = ProjectService(db)
    project = await service.update_project(project_id, project_data)

    return ResponseSchema(
        success=True,
        message="Project updated successfully",
        data=project.model_dump(mode="json"),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    project_id: UUID = Path(..., description="Project ID"),
    db: AsyncSession = Depends(get_db),
):
    """Delete a specific project."""

    service = ProjectService(db)
    await service.delete_project(project_id)

    return ResponseSchema(success=True, message="Project deleted successfully")


@router.patch("/{project_id}/status", response_model=ResponseSchema)
async def update_project_status(
    project_id: UUID = Path(..., description="Project ID"),
    status_data: ProjectStatusUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Change the status of a project."""

    service = ProjectService(db)
    project = await service.update_status(project_id, status_data)

    return ResponseSchema(
        success=True,
        message="Project status updated successfully",
        data=project.model_dump(mode="json"),
    )


@router.post("/{project_id}/photos", response_model=ResponseSchema, status_code=201)
async def add_project_photo(
    project_id: UUID = Path(..., description="Project ID"),
    photo_data: PhotoCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Attach photo metadata to a project."""

    service = ProjectService(db)
    project = await service.add_photo(project_id, photo_data)

    return ResponseSchema(
        success=True,
        message="Photo added successfully",
        data=project.model_dump(mode="json"),
    )


@router.post("/{project_id}/costs", response_model=ResponseSchema, status_code=201)
async def add_project_cost(
    project_id: UUID = Path(..., description="Project ID"),
    cost_data: CostCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Record an additional cost on a project."""

    service = ProjectService(db)
    project = await service.add_cost(project_id, cost_data)

    return ResponseSchema(
        success=True,
        message="Cost added successfully",
        data=project.model_dump(mode="json"),
    )


@router.get("/{project_id}/costs/summary", response_model=ResponseSchema)
async def get_project_cost_summary(
    project_id: UUID = Path(..., description="Project ID"),
    db: AsyncSession = Depends(get_db),
):
    """Get the derived cost summary of a project."""

    service = ProjectService(db)
    summary = await service.get_cost_summary(project_id)

    return ResponseSchema(success=True, data=summary.model_dump(mode="json"))


# ===== Yarn usage =====


@router.post("/{project_id}/yarns", response_model=ResponseSchema, status_code=201)
async def add_yarn_to_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_data: YarnUsageCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.add_yarn(project_id, usage_data)

    return ResponseSchema(
        success=True,
        message="Yarn added to project successfully",
        data=project.model_dump(mode="json"),
    )


@router.put("/{project_id}/yarns/{usage_id}", response_model=ResponseSchema)
async def update_yarn_in_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_id: UUID = Path(..., description="Yarn usage ID"),
    usage_data: YarnUsageUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.update_yarn(project_id, usage_id, usage_data)

    return ResponseSchema(
        success=True,
        message="Yarn usage updated successfully",
        data=project.model_dump(mode="json"),
    )


@router.delete("/{project_id}/yarns/{usage_id}", response_model=ResponseSchema)
async def remove_yarn_from_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_id: UUID = Path(..., description="Yarn usage ID"),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.remove_yarn(project_id, usage_id)

    return ResponseSchema(
        success=True,
        message="Yarn removed from project successfully",
        data=project.model_dump(mode="json"),
    )


# ===== Needle usage =====


@router.post("/{project_id}/needles", response_model=ResponseSchema, status_code=201)
async def add_needle_to_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_data: NeedleUsageCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.add_needle(project_id, usage_data)

    return ResponseSchema(
        success=True,
        message="Needle added to project successfully",
        data=project.model_dump(mode="json"),
    )


@router.put("/{project_id}/needles/{usage_id}", response_model=ResponseSchema)
async def update_needle_in_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_id: UUID = Path(..., description="Needle usage ID"),
    usage_data: NeedleUsageUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.update_needle(project_id, usage_id, usage_data)

    return ResponseSchema(
        success=True,
        message="Needle usage updated successfully",
        data=project.model_dump(mode="json"),
    )


@router.delete("/{project_id}/needles/{usage_id}", response_model=ResponseSchema)
async def remove_needle_from_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_id: UUID = Path(..., description="Needle usage ID"),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.remove_needle(project_id, usage_id)

    return ResponseSchema(
        success=True,
        message="Needle removed from project successfully",
        data=project.model_dump(mode="json"),
    )


# ===== Hook usage =====


@router.post("/{project_id}/hooks", response_model=ResponseSchema, status_code=201)
async def add_hook_to_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_data: HookUsageCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.add_hook(project_id, usage_data)

    return ResponseSchema(
        success=True,
        message="Hook added to project successfully",
        data=project.model_dump(mode="json"),
    )


@router.put("/{project_id}/hooks/{usage_id}", response_model=ResponseSchema)
async def update_hook_in_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_id: UUID = Path(..., description="Hook usage ID"),
    usage_data: HookUsageUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.update_hook(project_id, usage_id, usage_data)

    return ResponseSchema(
        success=True,
        message="Hook usage updated successfully",
        data=project.model_dump(mode="json"),
    )


@router.delete("/{project_id}/hooks/{usage_id}", response_model=ResponseSchema)
async def remove_hook_from_project(
    project_id: UUID = Path(..., description="Project ID"),
    usage_id: UUID = Path(..., description="Hook usage ID"),
    db: AsyncSession = Depends(get_db),
):
    service = ProjectService(db)
    project = await service.remove_hook(project_id, usage_id)

    return ResponseSchema(
        success=True,
        message="Hook removed from project successfully",
        data=project.model_dump(mode="json"),
    )

"""Catalog API controllers: yarns, needles and hooks."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_pagination
from app.database import get_db
from app.domains.catalog.service import HookService, NeedleService, YarnService
from app.schemas.base import ResponseSchema
from app.schemas.catalog import (
    HookCreate,
    HookFilter,
    HookResponse,
    HookUpdate,
    NeedleCreate,
    NeedleFilter,
    NeedleResponse,
    NeedleType,
    NeedleUpdate,
    ProjectReference,
    YarnCreate,
    YarnFilter,
    YarnPhotoCreate,
    YarnResponse,
    YarnUpdate,
)
from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)

yarn_router = APIRouter(prefix="/api/yarns", tags=["yarns"])
needle_router = APIRouter(prefix="/api/needles", tags=["needles"])
hook_router = APIRouter(prefix="/api/hooks", tags=["hooks"])


async def _detail(service, response_cls, entity) -> dict:
    """Serialize one catalog entry with the projects that use it."""
    projects = await service.projects_using(entity.id)
    response = response_cls.model_validate(entity)
    response.used_in_projects = [ProjectReference.model_validate(p) for p in projects]
    response.project_count = len(projects)
    return response.model_dump(mode="json")


# ===== Yarns =====


@yarn_router.get("", response_model=ResponseSchema)
async def get_yarns(
    brand: Optional[str] = Query(None),
    weight: Optional[str] = Query(None),
    color: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of yarns with optional filters."""

    filters = YarnFilter(brand=brand, weight=weight, color=color)
    service = YarnService(db)
    result = await service.list(filters.model_dump(exclude_none=True), pagination)
    counts = await service.project_counts(y.id for y in result["data"])

    data = []
    for yarn in result["data"]:
        response = YarnResponse.model_validate(yarn)
        response.project_count = counts[str(yarn.id)]
        data.append(response.model_dump(mode="json"))

    return ResponseSchema(
        success=True,
        data=data,
        pagination=result["pagination"],
    )


@yarn_router.post("", response_model=ResponseSchema, status_code=201)
async def create_yarn(yarn_data: YarnCreate, db: AsyncSession = Depends(get_db)):
    service = YarnService(db)
    yarn = await service.create(yarn_data)

    return ResponseSchema(
        success=True,
        message="Yarn created successfully",
        data=YarnResponse.model_validate(yarn).model_dump(mode="json"),
    )


@yarn_router.get("/{yarn_id}", response_model=ResponseSchema)
async def get_yarn(
    yarn_id: UUID = Path(..., description="Yarn ID"),
    db: AsyncSession = Depends(get_db),
):
    """Get a yarn together with the projects using it."""

    service = YarnService(db)
    yarn = await service.get(yarn_id)

    return ResponseSchema(success=True, data=await _detail(service, YarnResponse, yarn))


@yarn_router.put("/{yarn_id}", response_model=ResponseSchema)
async def update_yarn(
    yarn_id: UUID = Path(..., description="Yarn ID"),
    yarn_data: YarnUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = YarnService(db)
    yarn = await service.update(yarn_id, yarn_data)

    return ResponseSchema(
        success=True,
        message="Yarn updated successfully",
        data=YarnResponse.model_validate(yarn).model_dump(mode="json"),
    )


@yarn_router.delete("/{yarn_id}", response_model=ResponseSchema)
async def delete_yarn(
    yarn_id: UUID = Path(..., description="Yarn ID"),
    db: AsyncSession = Depends(get_db),
):
    service = YarnService(db)
    await service.delete(yarn_id)

    return ResponseSchema(success=True, message="Yarn deleted successfully")


@yarn_router.post("/{yarn_id}/photos", response_model=ResponseSchema, status_code=201)
async def add_yarn_photo(
    yarn_id: UUID = Path(..., description="Yarn ID"),
    photo_data: YarnPhotoCreate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = YarnService(db)
    yarn = await service.add_photo(yarn_id, photo_data)

    return ResponseSchema(
        success=True,
        message="Photo added successfully",
        data=YarnResponse.model_validate(yarn).model_dump(mode="json"),
    )


# ===== Needles =====


@needle_router.get("", response_model=ResponseSchema)
async def get_needles(
    type: Optional[NeedleType] = Query(None),
    size_mm: Optional[float] = Query(None, gt=0),
    material: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of needles with optional filters."""

    filters = NeedleFilter(type=type, size_mm=size_mm, material=material, brand=brand)
    service = NeedleService(db)
    result = await service.list(filters.model_dump(exclude_none=True), pagination)

    return ResponseSchema(
        success=True,
        data=[NeedleResponse.model_validate(n).model_dump(mode="json") for n in result["data"]],
        pagination=result["pagination"],
    )


@needle_router.post("", response_model=ResponseSchema, status_code=201)
async def create_needle(needle_data: NeedleCreate, db: AsyncSession = Depends(get_db)):
    service = NeedleService(db)
    needle = await service.create(needle_data)

    return ResponseSchema(
        success=True,
        message="Needle created successfully",
        data=NeedleResponse.model_validate(needle).model_dump(mode="json"),
    )


@needle_router.get("/{needle_id}", response_model=ResponseSchema)
async def get_needle(
    needle_id: UUID = Path(..., description="Needle ID"),
    db: AsyncSession = Depends(get_db),
):
    service = NeedleService(db)
    needle = await service.get(needle_id)

    return ResponseSchema(success=True, data=await _detail(service, NeedleResponse, needle))


@needle_router.put("/{needle_id}", response_model=ResponseSchema)
async def update_needle(
    needle_id: UUID = Path(..., description="Needle ID"),
    needle_data: NeedleUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = NeedleService(db)
    needle = await service.update(needle_id, needle_data)

    return ResponseSchema(
        success=True,
        message="Needle updated successfully",
        data=NeedleResponse.model_validate(needle).model_dump(mode="json"),
    )


@needle_router.delete("/{needle_id}", response_model=ResponseSchema)
async def delete_needle(
    needle_id: UUID = Path(..., description="Needle ID"),
    db: AsyncSession = Depends(get_db),
):
    service = NeedleService(db)
    await service.delete(needle_id)

    return ResponseSchema(success=True, message="Needle deleted successfully")


# ===== Hooks =====


@hook_router.get("", response_model=ResponseSchema)
async def get_hooks(
    size_mm: Optional[float] = Query(None, gt=0),
    material: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of hooks with optional filters."""

    filters = HookFilter(size_mm=size_mm, material=material, brand=brand)
    service = HookService(db)
    result = await service.list(filters.model_dump(exclude_none=True), pagination)

    return ResponseSchema(
        success=True,
        data=[HookResponse.model_validate(h).model_dump(mode="json") for h in result["data"]],
        pagination=result["pagination"],
    )


@hook_router.post("", response_model=ResponseSchema, status_code=201)
async def create_hook(hook_data: HookCreate, db: AsyncSession = Depends(get_db)):
    service = HookService(db)
    hook = await service.create(hook_data)

    return ResponseSchema(
        success=True,
        message="Hook created successfully",
        data=HookResponse.model_validate(hook).model_dump(mode="json"),
    )


@hook_router.get("/{hook_id}", response_model=ResponseSchema)
async def get_hook(
    hook_id: UUID = Path(..., description="Hook ID"),
    db: AsyncSession = Depends(get_db),
):
    service = HookService(db)
    hook = await service.get(hook_id)

    return ResponseSchema(success=True, data=await _detail(service, HookResponse, hook))


@hook_router.put("/{hook_id}", response_model=ResponseSchema)
async def update_hook(
    hook_id: UUID = Path(..., description="Hook ID"),
    hook_data: HookUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
):
    service = HookService(db)
    hook = await service.update(hook_id, hook_data)

    return ResponseSchema(
        success=True,
        message="Hook updated successfully",
        data=HookResponse.model_validate(hook).model_dump(mode="json"),
    )


@hook_router.delete("/{hook_id}", response_model=ResponseSchema)
async def delete_hook(
    hook_id: UUID = Path(..., description="Hook ID"),
    db: AsyncSession = Depends(get_db),
):
    service = HookService(db)
    await service.delete(hook_id)

    return ResponseSchema(success=True, message="Hook deleted successfully")

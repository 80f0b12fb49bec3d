"""Category API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import CurrentProfile, get_category_service
from api.v1.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_categories(
    request: Request,
    profile: CurrentProfile,
    service: CategoryService = Depends(get_category_service),
) -> CategoryListResponse:
    """Get the caller's active categories in display order."""
    categories = await service.get_all_for_user(profile.id)
    return CategoryListResponse(
        data=[CategoryResponse.model_validate(category) for category in categories]
    )


@router.post(
    "",
    response_model=CategoryDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_category(
    request: Request,
    body: CategoryCreate,
    profile: CurrentProfile,
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetailResponse:
    """Create a category; without a position it goes after the last one."""
    category = await service.create(
        user_id=profile.id,
        name=body.name,
        position=body.position,
    )
    return CategoryDetailResponse(data=CategoryResponse.model_validate(category))


@router.patch(
    "/{category_id}",
    response_model=CategoryDetailResponse,
    summary="Update a category",
    responses={404: {"description": "Category not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_category(
    request: Request,
    category_id: UUID,
    body: CategoryUpdate,
    profile: CurrentProfile,
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetailResponse:
    """Rename or reposition a category."""
    category = await service.update(
        category_id=category_id,
        user_id=profile.id,
        name=body.name,
        position=body.position,
    )
    return CategoryDetailResponse(data=CategoryResponse.model_validate(category))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    responses={404: {"description": "Category not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_category(
    request: Request,
    category_id: UUID,
    profile: CurrentProfile,
    service: CategoryService = Depends(get_category_service),
) -> None:
    """Soft-delete a category and the recommendations inside it."""
    await service.delete(category_id, profile.id)
    return None

"""Recommendation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import CurrentProfile, get_recommendation_service
from api.v1.schemas.recommendation import (
    RecommendationCreate,
    RecommendationDetailResponse,
    RecommendationListResponse,
    RecommendationResponse,
    RecommendationUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.recommendation_service import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get(
    "",
    response_model=RecommendationListResponse,
    summary="List recommendations",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_recommendations(
    request: Request,
    profile: CurrentProfile,
    category_id: UUID | None = Query(None, description="Only this category"),
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationListResponse:
    """Get the caller's active recommendations in display order."""
    items = await service.get_all_for_user(profile.id, category_id)
    return RecommendationListResponse(
        data=[RecommendationResponse.model_validate(item) for item in items]
    )


@router.post(
    "",
    response_model=RecommendationDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a recommendation",
    responses={404: {"description": "Category not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_recommendation(
    request: Request,
    body: RecommendationCreate,
    profile: CurrentProfile,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationDetailResponse:
    """Add a recommendation card to one of the caller's categories."""
    item = await service.create(
        user_id=profile.id,
        category_id=body.category_id,
        title=body.title,
        description=body.description,
        url=body.url,
        image_url=body.image_url,
        position=body.position,
    )
    return RecommendationDetailResponse(data=RecommendationResponse.model_validate(item))


@router.patch(
    "/{recommendation_id}",
    response_model=RecommendationDetailResponse,
    summary="Update a recommendation",
    responses={404: {"description": "Recommendation or category not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_recommendation(
    request: Request,
    recommendation_id: UUID,
    body: RecommendationUpdate,
    profile: CurrentProfile,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationDetailResponse:
    """Edit a card or move it to another category."""
    item = await service.update(
        recommendation_id,
        profile.id,
        body.model_dump(exclude_unset=True),
    )
    return RecommendationDetailResponse(data=RecommendationResponse.model_validate(item))


@router.delete(
    "/{recommendation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a recommendation",
    responses={404: {"description": "Recommendation not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_recommendation(
    request: Request,
    recommendation_id: UUID,
    profile: CurrentProfile,
    service: RecommendationService = Depends(get_recommendation_service),
) -> None:
    """Soft-delete a recommendation."""
    await service.delete(recommendation_id, profile.id)
    return None

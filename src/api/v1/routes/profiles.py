"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import OptionalUser
from api.v1.dependencies import CurrentProfile, get_profile_service, get_username_service
from api.v1.schemas.category import CategoryResponse
from api.v1.schemas.profile import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdate,
    PublicPageResponse,
    PublicProfileResponse,
    PublicSectionResponse,
)
from api.v1.schemas.recommendation import RecommendationResponse
from api.v1.schemas.username import (
    CooldownResponse,
    UsernameUpdateRequest,
    UsernameUpdateResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import Profile
from domain.entities.username import compute_cooldown
from domain.services.profile_service import ProfileService
from domain.services.username_service import UsernameService

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _detail(profile: Profile) -> ProfileDetailResponse:
    cooldown = compute_cooldown(profile.username_changed_at)
    return ProfileDetailResponse(
        data=ProfileResponse.model_validate(profile),
        cooldown=CooldownResponse(
            can_change=cooldown.can_change,
            days_remaining=cooldown.days_remaining,
            next_change_date=cooldown.next_change_date,
        ),
    )


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    profile: CurrentProfile,
) -> ProfileDetailResponse:
    """Get the caller's profile (created on first login) and cooldown state."""
    return _detail(profile)


@router.patch(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Update own profile",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_my_profile(
    request: Request,
    body: ProfileUpdate,
    profile: CurrentProfile,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Update display name, bio, colors, avatar and social links."""
    updated = await service.update(profile.id, body.model_dump(exclude_unset=True))
    return _detail(updated)


@router.post(
    "/me/username",
    response_model=UsernameUpdateResponse,
    summary="Change username",
    responses={
        200: {"description": "Structured result; check `success`"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_my_username(
    request: Request,
    body: UsernameUpdateRequest,
    profile: CurrentProfile,
    service: UsernameService = Depends(get_username_service),
) -> UsernameUpdateResponse:
    """Change the caller's username.

    Rule violations (invalid, taken, cooldown active) are reported with
    `success: false` and a reason rather than an error status.
    """
    result = await service.update_username(profile.id, body.username)
    return UsernameUpdateResponse(
        success=result.success,
        message=result.message,
        reason=result.reason,
        username=result.username,
        username_changed_at=result.username_changed_at,
    )


@router.get(
    "/{username}",
    response_model=PublicPageResponse,
    summary="Get a public page",
    responses={404: {"description": "No profile with this username"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_public_page(
    request: Request,
    username: str,
    user: OptionalUser,
    service: ProfileService = Depends(get_profile_service),
) -> PublicPageResponse:
    """Get a profile's public page with active categories and recommendations."""
    profile, sections = await service.get_public_page(username)
    return PublicPageResponse(
        profile=PublicProfileResponse.model_validate(profile),
        is_owner=user is not None and user.id == profile.id,
        sections=[
            PublicSectionResponse(
                category=CategoryResponse.model_validate(section.category),
                recommendations=[
                    RecommendationResponse.model_validate(item)
                    for item in section.recommendations
                ],
            )
            for section in sections
        ],
    )

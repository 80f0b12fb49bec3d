"""Username availability API routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_username_service
from api.v1.schemas.username import UsernameCheckRequest, UsernameCheckResponse
from core.rate_limit import USERNAME_CHECK_LIMIT, limiter
from domain.services.username_service import UsernameService

router = APIRouter(prefix="/usernames", tags=["usernames"])


@router.post(
    "/check",
    response_model=UsernameCheckResponse,
    summary="Check username availability",
    responses={
        200: {"description": "Availability answer (taken is a normal answer)"},
        500: {"description": "Availability could not be determined"},
    },
)
@limiter.limit(USERNAME_CHECK_LIMIT)  # type: ignore[untyped-decorator]
async def check_username(
    request: Request,
    body: UsernameCheckRequest,
    service: UsernameService = Depends(get_username_service),
) -> UsernameCheckResponse:
    """Check whether a username is valid and unclaimed.

    Public endpoint used while signing up. Only a yes/no answer is returned;
    nothing about the owning account is exposed.
    """
    result = await service.check_availability(body.username)
    return UsernameCheckResponse(available=result.available, message=result.message)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from src.application.dtos.profile_dto import ProfileResponse, UpdateProfileRequest
from src.application.use_cases.read_entity import ReadEntityUseCase
from src.application.use_cases.update_entity import UpdateEntityUseCase
from src.domain.entities.entity_kind import EntityKind
from src.infrastructure.api.dependencies import get_principal, get_read_use_case, get_update_use_case

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    responses={
        403: {"description": "Forbidden - Profiles are visible only to their owner"},
        404: {"description": "Not Found - Profile does not exist"},
    },
)


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get Own Profile",
)
def get_me(
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
):
    """Get the caller's profile."""
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return ProfileResponse.from_entity(reads.get(principal, EntityKind.PROFILE, principal))


@router.get(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Get Profile",
    description="""
    Retrieve a profile by id. **Access control**: owner only.
    """,
)
def get_profile(
    profile_id: str,
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
):
    return ProfileResponse.from_entity(reads.get(principal, EntityKind.PROFILE, profile_id))


@router.patch(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Update Profile",
    description="""
    Update name or company name. `role` and `id` are immutable.

    **Access control**: owner only
    """,
    responses={422: {"description": "Constraint Violation - Invalid or immutable field"}},
)
def update_profile(
    profile_id: str,
    body: UpdateProfileRequest,
    principal: str | None = Depends(get_principal),
    updates: UpdateEntityUseCase = Depends(get_update_use_case),
):
    patch = body.to_fields()
    return ProfileResponse.from_entity(updates.execute(principal, EntityKind.PROFILE, profile_id, patch))

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from src.application.dtos.profile_dto import (
    OnboardProfileRequest,
    ProfileResponse,
    ValidateTokenResponse,
)
from src.application.use_cases.provision_profile import ProvisionProfileUseCase
from src.domain.entities.entity_kind import EntityKind
from src.infrastructure.api.dependencies import get_principal, get_provision_use_case, get_store
from src.infrastructure.database.entity_store import EntityStore

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


@router.post(
    "/validate",
    response_model=ValidateTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate Authentication Token",
    description="""
    Validate the bearer token and report whether the caller has been onboarded.

    **Authentication required**: Yes (Bearer token)
    """,
)
def validate_token(
    principal: str | None = Depends(get_principal),
    store: EntityStore = Depends(get_store),
):
    """Echo the authenticated principal."""
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    profile = store.find(EntityKind.PROFILE, principal)
    return ValidateTokenResponse(principal_id=principal, has_profile=profile is not None)


@router.post(
    "/onboard",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Caller Profile",
    description="""
    Create the single profile bound to the caller's principal id.

    The role chosen here ('sponsor' or 'organizer') can never change later and
    decides which listings the account may publish.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={
        403: {"description": "Forbidden - Anonymous request"},
        422: {"description": "Constraint Violation - Invalid field or profile already exists"},
    },
)
def onboard(
    body: OnboardProfileRequest,
    principal: str | None = Depends(get_principal),
    provision: ProvisionProfileUseCase = Depends(get_provision_use_case),
):
    """Provision the caller's profile."""
    profile = provision.execute(principal, body.to_fields())
    return ProfileResponse.from_entity(profile)

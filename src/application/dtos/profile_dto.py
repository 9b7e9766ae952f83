from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.application.dtos.common_dto import EntityPayload
from src.domain.entities.profile import ProfileEntity


class OnboardProfileRequest(EntityPayload):
    """Request model for creating the caller's profile during onboarding."""
    name: str | None = Field(None, description="Contact name", examples=["Ada Lovelace"])
    company_name: str | None = Field(None, description="Company the account represents", examples=["Acme Events"])
    role: str | None = Field(None, description="Account type: 'sponsor' or 'organizer'", examples=["organizer"])


class UpdateProfileRequest(EntityPayload):
    """Partial update of a profile. `id` and `role` may only be repeated unchanged."""
    id: str | None = Field(None, description="Must equal the current id")
    name: str | None = Field(None, description="Contact name")
    company_name: str | None = Field(None, description="Company the account represents")
    role: str | None = Field(None, description="Must equal the current role")


class ProfileResponse(BaseModel):
    id: str = Field(..., description="Principal id the profile belongs to")
    name: str
    company_name: str
    role: str = Field(..., description="'sponsor' or 'organizer'")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, entity: ProfileEntity) -> "ProfileResponse":
        return cls(
            id=entity.id,
            name=entity.name,
            company_name=entity.company_name,
            role=entity.role,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class ValidateTokenResponse(BaseModel):
    """Response model for token validation."""
    principal_id: str = Field(..., description="Identifier of the authenticated principal")
    has_profile: bool = Field(..., description="Whether onboarding has created a profile yet")

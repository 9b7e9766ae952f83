from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.application.dtos.common_dto import EntityPayload
from src.domain.entities.sponsor_event_type import SponsorEventTypeEntity
from src.domain.entities.sponsor_offer import SponsorOfferEntity


class CreateSponsorOfferRequest(EntityPayload):
    profile_id: str | None = Field(None, description="Must be the caller's principal id")
    amount: Decimal | None = Field(None, description="Budget available, > 0", examples=["5000"])
    description: str | None = None


class UpdateSponsorOfferRequest(EntityPayload):
    id: str | None = Field(None, description="Immutable; may only be repeated unchanged")
    profile_id: str | None = Field(None, description="Immutable; may only be repeated unchanged")
    amount: Decimal | None = None
    description: str | None = None


class SponsorOfferResponse(BaseModel):
    id: str
    profile_id: str
    amount: Decimal
    description: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, entity: SponsorOfferEntity) -> "SponsorOfferResponse":
        return cls(
            id=entity.id,
            profile_id=entity.profile_id,
            amount=entity.amount,
            description=entity.description,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class ListSponsorOffersResponse(BaseModel):
    sponsor_offers: list[SponsorOfferResponse]


class CreateSponsorEventTypeRequest(EntityPayload):
    sponsor_offer_id: str | None = Field(None, description="Offer owned by the caller")
    event_type: str | None = Field(None, examples=["conference"])


class SponsorEventTypeResponse(BaseModel):
    id: str
    sponsor_offer_id: str
    event_type: str
    created_at: datetime

    @classmethod
    def from_entity(cls, entity: SponsorEventTypeEntity) -> "SponsorEventTypeResponse":
        return cls(
            id=entity.id,
            sponsor_offer_id=entity.sponsor_offer_id,
            event_type=entity.event_type,
            created_at=entity.created_at,
        )


class ListSponsorEventTypesResponse(BaseModel):
    sponsor_event_types: list[SponsorEventTypeResponse]

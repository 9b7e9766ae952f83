from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from src.application.dtos.common_dto import EntityPayload
from src.domain.entities.event import EventEntity


class CreateEventRequest(EntityPayload):
    """Sponsorship opportunity published by an organizer.

    Fields are optional at the HTTP layer so that missing values surface as
    constraint violations naming the field.
    """
    name: str | None = Field(None, examples=["Tech Summit 2025"])
    type: str | None = Field(None, description="Event category", examples=["conference"])
    amount: Decimal | None = Field(None, description="Sponsorship amount sought, > 0", examples=["2500.00"])
    city: str | None = Field(None, examples=["Lisbon"])
    description: str | None = None
    date: dt.date | None = Field(None, description="ISO date of the event")
    organizer_id: str | None = Field(None, description="Must be the caller's principal id")


class UpdateEventRequest(EntityPayload):
    id: str | None = Field(None, description="Immutable; may only be repeated unchanged")
    name: str | None = None
    type: str | None = None
    amount: Decimal | None = None
    city: str | None = None
    description: str | None = None
    date: dt.date | None = None
    organizer_id: str | None = Field(None, description="Immutable; may only be repeated unchanged")


class EventResponse(BaseModel):
    id: str
    name: str
    type: str
    amount: Decimal
    city: str
    description: str
    date: dt.date
    organizer_id: str
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_entity(cls, entity: EventEntity) -> "EventResponse":
        return cls(
            id=entity.id,
            name=entity.name,
            type=entity.type,
            amount=entity.amount,
            city=entity.city,
            description=entity.description,
            date=entity.date,
            organizer_id=entity.organizer_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class ListEventsResponse(BaseModel):
    events: list[EventResponse] = Field(..., description="Events matching the filters, newest first")

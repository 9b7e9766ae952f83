from __future__ import annotations

from enum import Enum

from src.domain.entities.event import EventEntity
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.sponsor_event_type import SponsorEventTypeEntity
from src.domain.entities.sponsor_offer import SponsorOfferEntity


class EntityKind(str, Enum):
    """The four entity collections; values double as table names."""

    PROFILE = "profiles"
    EVENT = "events"
    SPONSOR_OFFER = "sponsor_offers"
    SPONSOR_EVENT_TYPE = "sponsor_event_types"


ENTITY_TYPES: dict[EntityKind, type] = {
    EntityKind.PROFILE: ProfileEntity,
    EntityKind.EVENT: EventEntity,
    EntityKind.SPONSOR_OFFER: SponsorOfferEntity,
    EntityKind.SPONSOR_EVENT_TYPE: SponsorEventTypeEntity,
}

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SponsorEventTypeEntity:
    id: str
    sponsor_offer_id: str
    event_type: str
    created_at: datetime  # append-only, no updated_at

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal


@dataclass(frozen=True)
class EventEntity:
    id: str
    name: str
    type: str
    amount: Decimal
    city: str
    description: str
    date: date
    organizer_id: str  # owning organizer profile
    created_at: datetime
    updated_at: datetime

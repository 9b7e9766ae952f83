from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class SponsorOfferEntity:
    id: str
    profile_id: str  # owning sponsor profile
    amount: Decimal
    description: str | None
    created_at: datetime
    updated_at: datetime

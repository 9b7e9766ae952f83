from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    SPONSOR = "sponsor"
    ORGANIZER = "organizer"


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # principal id from Supabase auth
    name: str
    company_name: str
    role: str
    created_at: datetime
    updated_at: datetime

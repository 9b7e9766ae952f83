from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass

from supabase import Client, create_client

logger = logging.getLogger(__name__)

# namespace for principals derived from tokens when Supabase is disabled
_FAKE_PRINCIPAL_NAMESPACE = uuid.UUID("6f1c2a8e-4b7d-4e59-9a43-2d3c5b1e7f10")


@dataclass(slots=True, frozen=True)
class IdentityContext:
    principal_id: str
    email: str | None = None


class SupabaseAuthAdapter:
    """Resolves a Supabase access token to the authenticated principal.

    When SUPABASE_DISABLED=1, any non-empty token is accepted and mapped to a
    stable principal id derived from the token text. Otherwise SUPABASE_URL and
    SUPABASE_ANON_KEY must be set, or every token is rejected.
    """

    def __init__(self) -> None:
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self._client = None if self.disabled else get_supabase_client()

    def validate_token(self, token: str) -> IdentityContext:
        if not token:
            raise ValueError("Missing access token")
        if self.disabled:
            return IdentityContext(principal_id=str(uuid.uuid5(_FAKE_PRINCIPAL_NAMESPACE, token)))
        if self._client is None:
            logger.warning("rejecting token: SUPABASE_URL or SUPABASE_ANON_KEY is not set")
            raise ValueError("Supabase auth is not configured")
        # Real validation via Supabase Auth API
        try:  # pragma: no cover - network
            res = self._client.auth.get_user(token)
            user = res.user if res else None
        except Exception as exc:  # pragma: no cover - network
            logger.info("token rejected by Supabase: %s", exc)
            raise ValueError(f"Invalid access token: {exc}") from exc
        if not user:  # pragma: no cover - network
            raise ValueError("Invalid access token")
        return IdentityContext(principal_id=user.id, email=user.email)


_CLIENT_SINGLETON: Client | None = None


def get_supabase_client() -> Client | None:
    global _CLIENT_SINGLETON
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if os.getenv("SUPABASE_DISABLED", "0") == "1" or not url or not key:
        return None
    if _CLIENT_SINGLETON is None:
        _CLIENT_SINGLETON = create_client(url, key)
    return _CLIENT_SINGLETON

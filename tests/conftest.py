import os
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("USE_LOCAL_DB", "0")


class SteppingClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start or datetime(2025, 1, 22, 8, 39, 48, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture()
def store():
    from src.infrastructure.database.entity_store import EntityStore

    return EntityStore()


@pytest.fixture()
def integrity(clock):
    from src.domain.services.integrity_enforcer import IntegrityEnforcer

    return IntegrityEnforcer(clock=clock)


@pytest.fixture()
def policy(store):
    from src.domain.services.policy_engine import PolicyEngine

    return PolicyEngine(store.find)


@pytest.fixture()
def seed(store, integrity):
    """Insert rows directly, bypassing the policy engine."""
    from src.domain.entities.entity_kind import EntityKind

    def _seed(kind: EntityKind, **fields):
        return store.insert(kind, integrity.prepare_insert(kind, fields))

    return _seed


@pytest.fixture()
def marketplace(seed):
    """Organizers A and C, sponsors B and D, one event by A, one offer by B."""
    from src.domain.entities.entity_kind import EntityKind

    for pid, role in (("org-a", "organizer"), ("org-c", "organizer"), ("spo-b", "sponsor"), ("spo-d", "sponsor")):
        seed(EntityKind.PROFILE, id=pid, name=pid, company_name=f"{pid} inc", role=role)
    event = seed(
        EntityKind.EVENT,
        name="Tech Summit",
        type="conference",
        amount="2500",
        city="Lisbon",
        description="Annual summit",
        date="2025-06-01",
        organizer_id="org-a",
    )
    offer = seed(EntityKind.SPONSOR_OFFER, profile_id="spo-b", amount="5000", description=None)
    return {"event": event, "offer": offer}


@pytest.fixture()
def client(store, integrity) -> TestClient:
    # lazy import after env configured
    from src.infrastructure.api.dependencies import get_integrity, get_store
    from src.main import create_app

    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_integrity] = lambda: integrity
    return TestClient(app)


@pytest.fixture()
def auth_header():
    # any token is accepted in disabled mode; each token is its own principal
    def _header(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _header

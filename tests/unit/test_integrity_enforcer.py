from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from src.domain.entities.entity_kind import EntityKind
from src.domain.errors import ConstraintViolation


def _event(**overrides):
    fields = {
        "name": "Tech Summit",
        "type": "conference",
        "amount": Decimal("250.00"),
        "city": "Lisbon",
        "description": "Annual summit",
        "date": "2025-06-01",
        "organizer_id": "org-a",
    }
    fields.update(overrides)
    return fields


def test_insert_stamps_equal_timestamps_and_ignores_caller_values(integrity, clock):
    expected = clock.current
    bogus = datetime(1999, 1, 1, tzinfo=UTC)
    row = integrity.prepare_insert(EntityKind.EVENT, _event(created_at=bogus, updated_at=bogus))
    assert row["created_at"] == row["updated_at"] == expected
    assert row["date"] == date(2025, 6, 1)
    assert row["id"]


@pytest.mark.parametrize("amount", [0, "0", "0.00", -1, "-0.01"])
def test_non_positive_amount_rejected(integrity, amount):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(EntityKind.EVENT, _event(amount=amount))
    assert exc.value.field == "amount"


@pytest.mark.parametrize("amount", ["abc", "NaN", "Infinity", True, [1]])
def test_malformed_amount_rejected(integrity, amount):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(EntityKind.SPONSOR_OFFER, {"profile_id": "spo-b", "amount": amount})
    assert exc.value.field == "amount"


def test_smallest_positive_amount_accepted(integrity):
    row = integrity.prepare_insert(EntityKind.EVENT, _event(amount="0.01"))
    assert row["amount"] == Decimal("0.01")


@pytest.mark.parametrize("field", ["name", "type", "amount", "city", "description", "date", "organizer_id"])
def test_required_event_fields(integrity, field):
    fields = _event()
    del fields[field]
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(EntityKind.EVENT, fields)
    assert exc.value.field == field


def test_profile_role_enumeration(integrity):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(
            EntityKind.PROFILE, {"id": "p1", "name": "n", "company_name": "c", "role": "admin"}
        )
    assert exc.value.field == "role"


def test_profile_requires_principal_id(integrity):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(EntityKind.PROFILE, {"name": "n", "company_name": "c", "role": "sponsor"})
    assert exc.value.field == "id"


def test_unknown_field_rejected(integrity):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(EntityKind.EVENT, _event(budget=5))
    assert exc.value.field == "budget"


def test_sponsor_offer_description_nullable(integrity):
    row = integrity.prepare_insert(EntityKind.SPONSOR_OFFER, {"profile_id": "spo-b", "amount": 10})
    assert row["description"] is None


def test_invalid_date_rejected(integrity):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_insert(EntityKind.EVENT, _event(date="next tuesday"))
    assert exc.value.field == "date"


def test_sponsor_event_type_has_only_created_at(integrity):
    row = integrity.prepare_insert(
        EntityKind.SPONSOR_EVENT_TYPE, {"sponsor_offer_id": "o1", "event_type": "conference"}
    )
    assert "created_at" in row
    assert "updated_at" not in row


def test_update_always_advances_updated_at(integrity):
    current = integrity.prepare_insert(EntityKind.EVENT, _event())
    changes = integrity.prepare_update(EntityKind.EVENT, current, {})
    assert changes == {"updated_at": changes["updated_at"]}
    assert changes["updated_at"] > current["updated_at"]


def test_update_ignores_caller_timestamps(integrity):
    current = integrity.prepare_insert(EntityKind.EVENT, _event())
    bogus = datetime(1999, 1, 1, tzinfo=UTC)
    changes = integrity.prepare_update(EntityKind.EVENT, current, {"created_at": bogus, "updated_at": bogus})
    assert "created_at" not in changes
    assert changes["updated_at"] != bogus


@pytest.mark.parametrize(
    "kind,current,patch,field",
    [
        (EntityKind.PROFILE, {"id": "p1", "role": "sponsor"}, {"role": "organizer"}, "role"),
        (EntityKind.PROFILE, {"id": "p1", "role": "sponsor"}, {"id": "p2"}, "id"),
        (EntityKind.EVENT, {"id": "e1", "organizer_id": "org-a"}, {"organizer_id": "org-c"}, "organizer_id"),
        (EntityKind.SPONSOR_OFFER, {"id": "o1", "profile_id": "spo-b"}, {"profile_id": "spo-d"}, "profile_id"),
    ],
)
def test_immutable_fields_cannot_change(integrity, kind, current, patch, field):
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_update(kind, current, patch)
    assert exc.value.field == field
    assert exc.value.reason == "is immutable"


def test_immutable_fields_may_be_repeated_unchanged(integrity):
    current = {"id": "p1", "name": "Ada", "company_name": "Acme", "role": "sponsor"}
    changes = integrity.prepare_update(EntityKind.PROFILE, current, {"id": "p1", "role": "sponsor", "name": "Ada"})
    assert set(changes) == {"name", "updated_at"}


def test_update_cannot_null_required_field(integrity):
    current = integrity.prepare_insert(EntityKind.EVENT, _event())
    with pytest.raises(ConstraintViolation) as exc:
        integrity.prepare_update(EntityKind.EVENT, current, {"city": None})
    assert exc.value.field == "city"


def test_update_validates_amount(integrity):
    current = integrity.prepare_insert(EntityKind.SPONSOR_OFFER, {"profile_id": "spo-b", "amount": 10})
    with pytest.raises(ConstraintViolation):
        integrity.prepare_update(EntityKind.SPONSOR_OFFER, current, {"amount": 0})

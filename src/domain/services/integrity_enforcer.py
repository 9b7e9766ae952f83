from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping

from src.domain.entities.entity_kind import EntityKind
from src.domain.entities.profile import Role
from src.domain.errors import ConstraintViolation

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("created_at", "updated_at")


def _text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConstraintViolation(name, "must be a string")
    return value


def _amount(name: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConstraintViolation(name, "must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ConstraintViolation(name, "must be a number") from exc
    if not amount.is_finite():
        raise ConstraintViolation(name, "must be a finite number")
    return amount


def _date(name: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConstraintViolation(name, "must be an ISO date (YYYY-MM-DD)") from exc
    raise ConstraintViolation(name, "must be a date")


@dataclass(frozen=True)
class FieldRule:
    name: str
    parse: Callable[[str, Any], Any] = _text
    required: bool = True
    choices: frozenset[str] | None = None
    positive: bool = False
    immutable: bool = False

    def validate(self, value: Any) -> Any:
        if value is None:
            if self.required:
                raise ConstraintViolation(self.name, "is required")
            return None
        parsed = self.parse(self.name, value)
        if self.choices is not None and parsed not in self.choices:
            allowed = ", ".join(sorted(self.choices))
            raise ConstraintViolation(self.name, f"must be one of: {allowed}")
        if self.positive and parsed <= 0:
            raise ConstraintViolation(self.name, "must be greater than zero")
        return parsed


_ID = FieldRule("id", immutable=True)

SCHEMAS: dict[EntityKind, tuple[FieldRule, ...]] = {
    EntityKind.PROFILE: (
        _ID,
        FieldRule("name"),
        FieldRule("company_name"),
        FieldRule("role", choices=frozenset(r.value for r in Role), immutable=True),
    ),
    EntityKind.EVENT: (
        _ID,
        FieldRule("name"),
        FieldRule("type"),
        FieldRule("amount", parse=_amount, positive=True),
        FieldRule("city"),
        FieldRule("description"),
        FieldRule("date", parse=_date),
        FieldRule("organizer_id", immutable=True),
    ),
    EntityKind.SPONSOR_OFFER: (
        _ID,
        FieldRule("profile_id", immutable=True),
        FieldRule("amount", parse=_amount, positive=True),
        FieldRule("description", required=False),
    ),
    EntityKind.SPONSOR_EVENT_TYPE: (
        _ID,
        FieldRule("sponsor_offer_id", immutable=True),
        FieldRule("event_type"),
    ),
}

# SponsorEventType is append-only and has no modification timestamp.
HAS_UPDATED_AT = frozenset({EntityKind.PROFILE, EntityKind.EVENT, EntityKind.SPONSOR_OFFER})


def columns_for(kind: EntityKind) -> tuple[str, ...]:
    names = tuple(rule.name for rule in SCHEMAS[kind])
    stamps = TIMESTAMP_FIELDS if kind in HAS_UPDATED_AT else ("created_at",)
    return names + stamps


def parse_filter(kind: EntityKind, name: str, value: Any) -> Any:
    """Coerce a query filter value to the column's stored type.

    Query strings arrive as text, so ``amount=2500`` must compare as a Decimal
    and ``date=2025-06-01`` as a date.
    """
    for rule in SCHEMAS[kind]:
        if rule.name == name:
            return rule.parse(name, value)
    if name in TIMESTAMP_FIELDS and isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise ConstraintViolation(name, "must be an ISO timestamp") from exc
    return value


def _utcnow() -> datetime:
    return datetime.now(UTC)


class IntegrityEnforcer:
    """Validates field values and stamps timestamps on every mutation.

    Runs after the Policy Engine has allowed the operation and before the
    Entity Store applies it.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self.clock = clock

    def prepare_insert(self, kind: EntityKind, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return the complete row to insert.

        Raises:
            ConstraintViolation: On unknown fields, missing required values,
                out-of-range enums or non-positive amounts.
        """
        self._reject_unknown(kind, fields)
        values = dict(fields)
        if values.get("id") is None and kind is not EntityKind.PROFILE:
            values["id"] = str(uuid.uuid4())

        row = {rule.name: rule.validate(values.get(rule.name)) for rule in SCHEMAS[kind]}
        now = self.clock()
        row["created_at"] = now
        if kind in HAS_UPDATED_AT:
            row["updated_at"] = now
        return row

    def prepare_update(
        self, kind: EntityKind, current: Mapping[str, Any], patch: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Return the column changes for an update, always including updated_at.

        Immutable columns may appear in ``patch`` only with their current value.
        """
        self._reject_unknown(kind, patch)
        rules = {rule.name: rule for rule in SCHEMAS[kind]}
        changes: dict[str, Any] = {}
        for name, value in patch.items():
            if name in TIMESTAMP_FIELDS:
                continue
            rule = rules[name]
            parsed = rule.validate(value)
            if rule.immutable:
                if parsed != current.get(name):
                    raise ConstraintViolation(name, "is immutable")
                continue
            changes[name] = parsed
        if kind in HAS_UPDATED_AT:
            changes["updated_at"] = self.clock()
        return changes

    @staticmethod
    def _reject_unknown(kind: EntityKind, fields: Mapping[str, Any]) -> None:
        known = set(columns_for(kind))
        for name in fields:
            if name not in known:
                logger.info("rejected unknown field %s for %s", name, kind.value)
                raise ConstraintViolation(name, "is not a known field")

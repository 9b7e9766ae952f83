from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping

import psycopg2
import psycopg2.errors

from src.domain.entities.entity_kind import ENTITY_TYPES, EntityKind
from src.domain.entities.profile import Role
from src.domain.errors import ConstraintViolation, NotFound
from src.domain.services.integrity_enforcer import columns_for, parse_filter
from src.infrastructure.database.postgres_client import PostgresClient, get_postgres_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForeignKey:
    field: str
    references: EntityKind
    # role the referenced profile must hold, if any
    role: Role | None = None


FOREIGN_KEYS: dict[EntityKind, tuple[ForeignKey, ...]] = {
    EntityKind.EVENT: (ForeignKey("organizer_id", EntityKind.PROFILE, Role.ORGANIZER),),
    EntityKind.SPONSOR_OFFER: (ForeignKey("profile_id", EntityKind.PROFILE, Role.SPONSOR),),
    EntityKind.SPONSOR_EVENT_TYPE: (ForeignKey("sponsor_offer_id", EntityKind.SPONSOR_OFFER),),
}


class EntityStore:
    """Storage for the four entity kinds with foreign-key enforcement.

    Callers are expected to have passed the Policy Engine already; the store
    only guards referential integrity. Backed by local PostgreSQL when
    USE_LOCAL_DB=1, otherwise by process memory guarded by a single lock.
    """

    def __init__(self, pg_client: PostgresClient | None = None) -> None:
        self.pg_client = pg_client if pg_client is not None else get_postgres_client()
        self._mem: dict[EntityKind, dict[str, dict[str, Any]]] = {kind: {} for kind in EntityKind}
        self._lock = threading.RLock()

    def _row_to_entity(self, kind: EntityKind, row: Mapping[str, Any]) -> Any:
        """Convert a database row to the entity dataclass for ``kind``."""
        values = {name: row.get(name) for name in columns_for(kind)}
        for stamp in ("created_at", "updated_at"):
            if isinstance(values.get(stamp), str):
                values[stamp] = datetime.fromisoformat(values[stamp])
        if isinstance(values.get("date"), str):
            values["date"] = date.fromisoformat(values["date"])
        return ENTITY_TYPES[kind](**values)

    @staticmethod
    def _check_columns(kind: EntityKind, names: Iterable[str]) -> None:
        known = columns_for(kind)
        for name in names:
            if name not in known:
                raise ConstraintViolation(name, f"is not a column of {kind.value}")

    @staticmethod
    def _check_reference(fk: ForeignKey, value: Any, referenced: Mapping[str, Any] | None) -> None:
        if referenced is None:
            raise ConstraintViolation(fk.field, f"references missing {fk.references.value} row '{value}'")
        if fk.role is not None and referenced.get("role") != fk.role.value:
            raise ConstraintViolation(fk.field, f"must reference a {fk.role.value} profile")

    def find(self, kind: EntityKind, entity_id: str) -> Any | None:
        # PostgreSQL mode
        if self.pg_client:
            row = self.pg_client.execute_one(f"SELECT * FROM {kind.value} WHERE id = %s", (entity_id,))
            return self._row_to_entity(kind, row) if row else None

        # In-memory mode
        with self._lock:
            row = self._mem[kind].get(entity_id)
            return self._row_to_entity(kind, row) if row else None

    def get(self, kind: EntityKind, entity_id: str) -> Any:
        entity = self.find(kind, entity_id)
        if entity is None:
            raise NotFound(kind.value, entity_id)
        return entity

    def list(self, kind: EntityKind, filters: Mapping[str, Any] | None = None) -> list[Any]:
        """Rows matching every equality filter, newest first."""
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        self._check_columns(kind, filters)
        filters = {name: parse_filter(kind, name, value) for name, value in filters.items()}

        # PostgreSQL mode
        if self.pg_client:
            where = " AND ".join(f"{name} = %s" for name in filters) or "TRUE"
            query = f"SELECT * FROM {kind.value} WHERE {where} ORDER BY created_at DESC"
            rows = self.pg_client.execute_many(query, tuple(filters.values()))
            return [self._row_to_entity(kind, row) for row in rows]

        # In-memory mode
        with self._lock:
            rows = [
                row
                for row in self._mem[kind].values()
                if all(row.get(name) == value for name, value in filters.items())
            ]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return [self._row_to_entity(kind, row) for row in rows]

    def insert(self, kind: EntityKind, row: Mapping[str, Any]) -> Any:
        """Insert a fully prepared row.

        Raises:
            ConstraintViolation: If a foreign key dangles, points at a profile
                with the wrong role, or the id is already taken.
        """
        self._check_columns(kind, row)
        foreign_keys = FOREIGN_KEYS.get(kind, ())

        # PostgreSQL mode
        if self.pg_client:
            columns = columns_for(kind)
            placeholders = ", ".join(["%s"] * len(columns))
            query = f"INSERT INTO {kind.value} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *"
            try:
                with self.pg_client.transaction() as cursor:
                    for fk in foreign_keys:
                        cursor.execute(
                            f"SELECT * FROM {fk.references.value} WHERE id = %s FOR SHARE",
                            (row[fk.field],),
                        )
                        self._check_reference(fk, row[fk.field], cursor.fetchone())
                    cursor.execute(query, tuple(row.get(name) for name in columns))
                    inserted = dict(cursor.fetchone())
            except psycopg2.errors.UniqueViolation as exc:
                raise ConstraintViolation("id", "already exists") from exc
            except psycopg2.Error as exc:
                raise RuntimeError(f"PostgreSQL insert {kind.value} failed: {exc}") from exc
            logger.info("inserted %s id=%s", kind.value, inserted["id"])
            return self._row_to_entity(kind, inserted)

        # In-memory mode
        with self._lock:
            for fk in foreign_keys:
                value = row.get(fk.field)
                self._check_reference(fk, value, self._mem[fk.references].get(value))
            stored = {name: row.get(name) for name in columns_for(kind)}
            if stored["id"] is None:
                raise ConstraintViolation("id", "is required")
            if stored["id"] in self._mem[kind]:
                raise ConstraintViolation("id", "already exists")
            self._mem[kind][stored["id"]] = stored
        logger.info("inserted %s id=%s", kind.value, stored["id"])
        return self._row_to_entity(kind, stored)

    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: Mapping[str, Any],
        expected: Mapping[str, Any] | None = None,
    ) -> Any | None:
        """Apply ``changes`` only while every ``expected`` column still holds.

        Returns the updated entity, or None when the expected values no longer
        match (the row changed hands between authorization and mutation).

        Raises:
            NotFound: If no row has ``entity_id``.
        """
        expected = dict(expected or {})
        self._check_columns(kind, changes)
        self._check_columns(kind, expected)

        # PostgreSQL mode
        if self.pg_client:
            if not changes:
                current = self.get(kind, entity_id)
                matches = all(getattr(current, k) == v for k, v in expected.items())
                return current if matches else None
            assignments = ", ".join(f"{name} = %s" for name in changes)
            conditions = "".join(f" AND {name} = %s" for name in expected)
            query = f"UPDATE {kind.value} SET {assignments} WHERE id = %s{conditions} RETURNING *"
            params = (*changes.values(), entity_id, *expected.values())
            try:
                with self.pg_client.transaction() as cursor:
                    cursor.execute(query, params)
                    updated = cursor.fetchone()
                    if updated is None:
                        cursor.execute(f"SELECT 1 FROM {kind.value} WHERE id = %s", (entity_id,))
                        exists = cursor.fetchone() is not None
                    else:
                        updated = dict(updated)
            except psycopg2.Error as exc:
                raise RuntimeError(f"PostgreSQL update {kind.value} failed: {exc}") from exc
            if updated is None:
                if not exists:
                    raise NotFound(kind.value, entity_id)
                logger.info("update of %s id=%s lost ownership race", kind.value, entity_id)
                return None
            logger.info("updated %s id=%s fields=%s", kind.value, entity_id, sorted(changes))
            return self._row_to_entity(kind, updated)

        # In-memory mode
        with self._lock:
            current = self._mem[kind].get(entity_id)
            if current is None:
                raise NotFound(kind.value, entity_id)
            if any(current.get(name) != value for name, value in expected.items()):
                logger.info("update of %s id=%s lost ownership race", kind.value, entity_id)
                return None
            updated = {**current, **changes}
            self._mem[kind][entity_id] = updated
        logger.info("updated %s id=%s fields=%s", kind.value, entity_id, sorted(changes))
        return self._row_to_entity(kind, updated)


# Simple reusable singleton store for the API layer
_STORE_SINGLETON: EntityStore | None = None


def get_entity_store() -> EntityStore:
    global _STORE_SINGLETON
    if _STORE_SINGLETON is None:
        _STORE_SINGLETON = EntityStore()
    return _STORE_SINGLETON

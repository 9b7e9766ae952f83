from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from src.domain.entities.entity_kind import EntityKind
from src.domain.services.policy_engine import Decision, Operation, PolicyEngine
from src.infrastructure.database.entity_store import EntityStore


@dataclass
class ReadEntityUseCase:
    store: EntityStore
    policy: PolicyEngine

    def get(self, principal: str | None, kind: EntityKind, entity_id: str) -> Any:
        """
        Fetch one row the principal may read.

        Raises:
            NotFound: If the row does not exist.
            PermissionDenied: If the read policy denies it.
        """
        entity = self.store.get(kind, entity_id)
        self.policy.enforce(principal, kind, Operation.READ, asdict(entity))
        return entity

    def list(
        self, principal: str | None, kind: EntityKind, filters: Mapping[str, Any] | None = None
    ) -> list[Any]:
        """Rows matching ``filters`` that the read policy allows, newest first."""
        return [
            entity
            for entity in self.store.list(kind, filters)
            if self.policy.authorize(principal, kind, Operation.READ, asdict(entity)) is Decision.ALLOW
        ]

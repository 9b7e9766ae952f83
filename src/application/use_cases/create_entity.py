from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from src.domain.entities.entity_kind import EntityKind
from src.domain.services.integrity_enforcer import IntegrityEnforcer
from src.domain.services.policy_engine import Operation, PolicyEngine
from src.infrastructure.database.entity_store import EntityStore


@dataclass
class CreateEntityUseCase:
    store: EntityStore
    policy: PolicyEngine
    integrity: IntegrityEnforcer

    def execute(self, principal: str | None, kind: EntityKind, fields: Mapping[str, Any]) -> Any:
        """
        Create a row after the role-eligibility and ownership-binding checks.

        The store re-validates the referenced rows inside the insert, and the
        ownership columns the policy relied on can never change afterwards.
        """
        self.policy.enforce(principal, kind, Operation.CREATE, fields)
        row = self.integrity.prepare_insert(kind, fields)
        return self.store.insert(kind, row)

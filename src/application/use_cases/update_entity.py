from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from src.domain.entities.entity_kind import EntityKind
from src.domain.errors import PermissionDenied
from src.domain.services.integrity_enforcer import IntegrityEnforcer
from src.domain.services.policy_engine import Operation, PolicyEngine
from src.infrastructure.database.entity_store import EntityStore


@dataclass
class UpdateEntityUseCase:
    store: EntityStore
    policy: PolicyEngine
    integrity: IntegrityEnforcer

    def execute(
        self, principal: str | None, kind: EntityKind, entity_id: str, patch: Mapping[str, Any]
    ) -> Any:
        """
        Authorize, validate and apply a partial update as one check-then-act unit.

        The store applies the change only while the row is still owned by the
        principal, so ownership cannot move between the check and the write.

        Raises:
            NotFound: If the row does not exist.
            PermissionDenied: If the update policy denies it, or ownership
                changed before the write.
            ConstraintViolation: On invalid or immutable fields.
        """
        current = asdict(self.store.get(kind, entity_id))
        self.policy.enforce(principal, kind, Operation.UPDATE, current)
        changes = self.integrity.prepare_update(kind, current, patch)

        rule = self.policy.rule_for(kind, Operation.UPDATE)
        expected = {rule.owner_field: principal} if rule and rule.owner_field else None
        updated = self.store.update(kind, entity_id, changes, expected=expected)
        if updated is None:
            raise PermissionDenied()
        return updated

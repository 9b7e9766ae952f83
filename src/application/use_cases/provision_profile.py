from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from src.domain.entities.entity_kind import EntityKind
from src.domain.entities.profile import ProfileEntity
from src.domain.errors import ConstraintViolation, PermissionDenied
from src.domain.services.integrity_enforcer import IntegrityEnforcer
from src.infrastructure.database.entity_store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class ProvisionProfileUseCase:
    """
    Onboarding step run by the identity flow, outside the row policies.

    Each principal gets exactly one Profile whose id is the principal id.
    """

    store: EntityStore
    integrity: IntegrityEnforcer

    def execute(self, principal: str | None, fields: Mapping[str, Any]) -> ProfileEntity:
        """
        Raises:
            PermissionDenied: For anonymous callers.
            ConstraintViolation: On invalid fields, an id other than the
                principal, or if the profile already exists.
        """
        if not principal:
            raise PermissionDenied()
        if fields.get("id", principal) != principal:
            raise ConstraintViolation("id", "must be the caller's principal id")
        row = self.integrity.prepare_insert(EntityKind.PROFILE, {**fields, "id": principal})
        profile = self.store.insert(EntityKind.PROFILE, row)
        logger.info("provisioned %s profile for principal=%s", profile.role, principal)
        return profile

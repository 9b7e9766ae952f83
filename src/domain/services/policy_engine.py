"""Row-level access control for the sponsorship marketplace.

The permission matrix lives in ``POLICY_TABLE`` as data: each
(EntityKind, Operation) pair maps to a ``Rule`` built from small predicates.
A missing pair means the operation is not supported and is always denied.
Adding an entity kind or operation only extends the table.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from src.domain.entities.entity_kind import EntityKind
from src.domain.entities.profile import Role
from src.domain.errors import NotFound, PermissionDenied

logger = logging.getLogger(__name__)

Lookup = Callable[[EntityKind, str], Any]


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class PolicyContext:
    principal: str
    # existing row for read/update, candidate fields for create
    target: Mapping[str, Any]
    lookup: Lookup


Predicate = Callable[[PolicyContext], bool]


@dataclass(frozen=True)
class Rule:
    check: Predicate
    # column re-checked against the principal when the mutation is applied
    owner_field: str | None = None


def authenticated(ctx: PolicyContext) -> bool:
    return True


def owned_by(field: str) -> Predicate:
    def check(ctx: PolicyContext) -> bool:
        return ctx.target.get(field) == ctx.principal

    return check


def principal_has_role(role: Role) -> Predicate:
    def check(ctx: PolicyContext) -> bool:
        profile = ctx.lookup(EntityKind.PROFILE, ctx.principal)
        return profile is not None and profile.role == role.value

    return check


def references_owned(field: str, kind: EntityKind, owner_field: str) -> Predicate:
    """The row referenced by ``field`` exists and is owned by the principal."""

    def check(ctx: PolicyContext) -> bool:
        ref_id = ctx.target.get(field)
        if not ref_id:
            return False
        referenced = ctx.lookup(kind, ref_id)
        return referenced is not None and getattr(referenced, owner_field) == ctx.principal

    return check


def all_of(*predicates: Predicate) -> Predicate:
    def check(ctx: PolicyContext) -> bool:
        return all(p(ctx) for p in predicates)

    return check


POLICY_TABLE: dict[tuple[EntityKind, Operation], Rule] = {
    # Profiles are created by identity provisioning, never through the policy.
    (EntityKind.PROFILE, Operation.READ): Rule(owned_by("id")),
    (EntityKind.PROFILE, Operation.UPDATE): Rule(owned_by("id"), owner_field="id"),
    (EntityKind.EVENT, Operation.READ): Rule(authenticated),
    (EntityKind.EVENT, Operation.CREATE): Rule(
        all_of(principal_has_role(Role.ORGANIZER), owned_by("organizer_id"))
    ),
    (EntityKind.EVENT, Operation.UPDATE): Rule(
        owned_by("organizer_id"), owner_field="organizer_id"
    ),
    (EntityKind.SPONSOR_OFFER, Operation.READ): Rule(authenticated),
    (EntityKind.SPONSOR_OFFER, Operation.CREATE): Rule(
        all_of(principal_has_role(Role.SPONSOR), owned_by("profile_id"))
    ),
    (EntityKind.SPONSOR_OFFER, Operation.UPDATE): Rule(
        owned_by("profile_id"), owner_field="profile_id"
    ),
    (EntityKind.SPONSOR_EVENT_TYPE, Operation.READ): Rule(authenticated),
    (EntityKind.SPONSOR_EVENT_TYPE, Operation.CREATE): Rule(
        references_owned("sponsor_offer_id", EntityKind.SPONSOR_OFFER, "profile_id")
    ),
}


class PolicyEngine:
    """Evaluates ``POLICY_TABLE`` for a principal passed in explicitly.

    ``lookup`` resolves ownership and role questions, normally
    ``EntityStore.find``.
    """

    def __init__(
        self,
        lookup: Lookup,
        table: Mapping[tuple[EntityKind, Operation], Rule] | None = None,
    ) -> None:
        self.lookup = lookup
        self.table = POLICY_TABLE if table is None else table

    def rule_for(self, kind: EntityKind, operation: Operation) -> Rule | None:
        return self.table.get((kind, operation))

    def authorize(
        self,
        principal: str | None,
        kind: EntityKind,
        operation: Operation,
        target: Mapping[str, Any] | None,
    ) -> Decision:
        """Return ALLOW or DENY; never raises for a well-formed request.

        Not-found targets and forbidden targets both yield DENY.
        """
        decision = self._evaluate(principal, kind, operation, target)
        logger.debug(
            "authorize principal=%s kind=%s op=%s -> %s",
            principal,
            kind.value,
            operation.value,
            decision.value,
        )
        return decision

    def enforce(
        self,
        principal: str | None,
        kind: EntityKind,
        operation: Operation,
        target: Mapping[str, Any] | None,
    ) -> None:
        if self.authorize(principal, kind, operation, target) is Decision.DENY:
            logger.info("denied %s on %s for principal=%s", operation.value, kind.value, principal)
            raise PermissionDenied()

    def _evaluate(
        self,
        principal: str | None,
        kind: EntityKind,
        operation: Operation,
        target: Mapping[str, Any] | None,
    ) -> Decision:
        if not principal or target is None:
            return Decision.DENY
        rule = self.rule_for(kind, operation)
        if rule is None:
            return Decision.DENY
        try:
            allowed = rule.check(PolicyContext(principal=principal, target=target, lookup=self.lookup))
        except NotFound:
            allowed = False
        return Decision.ALLOW if allowed else Decision.DENY

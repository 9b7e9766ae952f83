from dataclasses import asdict

import pytest

from src.domain.entities.entity_kind import EntityKind
from src.domain.errors import PermissionDenied
from src.domain.services.policy_engine import (
    Decision,
    Operation,
    PolicyEngine,
    Rule,
    authenticated,
)

ALLOW, DENY = Decision.ALLOW, Decision.DENY


def _event_fields(organizer_id):
    return {
        "name": "Meetup",
        "type": "meetup",
        "amount": "100",
        "city": "Porto",
        "description": "Monthly meetup",
        "date": "2025-03-01",
        "organizer_id": organizer_id,
    }


@pytest.mark.parametrize("principal", ["org-a", "org-c", "spo-b", "stranger"])
def test_profile_read_and_update_only_by_owner(policy, store, marketplace, principal):
    profile = asdict(store.get(EntityKind.PROFILE, "org-a"))
    expected = ALLOW if principal == "org-a" else DENY
    assert policy.authorize(principal, EntityKind.PROFILE, Operation.READ, profile) is expected
    assert policy.authorize(principal, EntityKind.PROFILE, Operation.UPDATE, profile) is expected


@pytest.mark.parametrize("kind", list(EntityKind))
@pytest.mark.parametrize("operation", list(Operation))
def test_anonymous_is_denied_everything(policy, marketplace, kind, operation):
    target = {"id": "org-a", "organizer_id": "org-a", "profile_id": "spo-b"}
    assert policy.authorize(None, kind, operation, target) is DENY
    assert policy.authorize("", kind, operation, target) is DENY


def test_organizer_creates_event_for_self_only(policy, marketplace):
    assert policy.authorize("org-a", EntityKind.EVENT, Operation.CREATE, _event_fields("org-a")) is ALLOW
    assert policy.authorize("org-a", EntityKind.EVENT, Operation.CREATE, _event_fields("org-c")) is DENY
    assert policy.authorize("org-a", EntityKind.EVENT, Operation.CREATE, _event_fields(None)) is DENY


@pytest.mark.parametrize("organizer_id", ["spo-b", "org-a", "org-c", None])
def test_sponsor_can_never_create_event(policy, marketplace, organizer_id):
    fields = _event_fields(organizer_id)
    assert policy.authorize("spo-b", EntityKind.EVENT, Operation.CREATE, fields) is DENY


def test_principal_without_profile_cannot_create(policy, marketplace):
    assert policy.authorize("ghost", EntityKind.EVENT, Operation.CREATE, _event_fields("ghost")) is DENY
    fields = {"profile_id": "ghost", "amount": "10"}
    assert policy.authorize("ghost", EntityKind.SPONSOR_OFFER, Operation.CREATE, fields) is DENY


@pytest.mark.parametrize(
    "kind", [EntityKind.EVENT, EntityKind.SPONSOR_OFFER, EntityKind.SPONSOR_EVENT_TYPE]
)
@pytest.mark.parametrize("principal", ["org-a", "spo-b", "ghost"])
def test_listings_readable_by_any_authenticated_principal(policy, marketplace, kind, principal):
    assert policy.authorize(principal, kind, Operation.READ, {"id": "whatever"}) is ALLOW


def test_event_update_only_by_owning_organizer(policy, marketplace):
    event = asdict(marketplace["event"])
    assert policy.authorize("org-a", EntityKind.EVENT, Operation.UPDATE, event) is ALLOW
    assert policy.authorize("org-c", EntityKind.EVENT, Operation.UPDATE, event) is DENY
    assert policy.authorize("spo-b", EntityKind.EVENT, Operation.UPDATE, event) is DENY


def test_sponsor_offer_create_requires_sponsor_role_and_binding(policy, marketplace):
    kind = EntityKind.SPONSOR_OFFER
    assert policy.authorize("spo-b", kind, Operation.CREATE, {"profile_id": "spo-b"}) is ALLOW
    assert policy.authorize("spo-b", kind, Operation.CREATE, {"profile_id": "spo-d"}) is DENY
    assert policy.authorize("org-a", kind, Operation.CREATE, {"profile_id": "org-a"}) is DENY


def test_sponsor_offer_update_only_by_owner(policy, marketplace):
    offer = asdict(marketplace["offer"])
    assert policy.authorize("spo-b", EntityKind.SPONSOR_OFFER, Operation.UPDATE, offer) is ALLOW
    assert policy.authorize("spo-d", EntityKind.SPONSOR_OFFER, Operation.UPDATE, offer) is DENY


def test_sponsor_event_type_requires_owned_offer(policy, marketplace):
    kind = EntityKind.SPONSOR_EVENT_TYPE
    offer_id = marketplace["offer"].id
    fields = {"sponsor_offer_id": offer_id, "event_type": "conference"}
    assert policy.authorize("spo-b", kind, Operation.CREATE, fields) is ALLOW
    # the offer exists but belongs to another sponsor
    assert policy.authorize("spo-d", kind, Operation.CREATE, fields) is DENY
    assert policy.authorize("org-a", kind, Operation.CREATE, fields) is DENY
    missing = {"sponsor_offer_id": "no-such-offer", "event_type": "conference"}
    assert policy.authorize("spo-b", kind, Operation.CREATE, missing) is DENY
    assert policy.authorize("spo-b", kind, Operation.CREATE, {"event_type": "conference"}) is DENY


@pytest.mark.parametrize(
    "kind,operation",
    [
        (EntityKind.PROFILE, Operation.CREATE),
        (EntityKind.SPONSOR_EVENT_TYPE, Operation.UPDATE),
        *[(kind, Operation.DELETE) for kind in EntityKind],
    ],
)
def test_unsupported_operations_are_denied(policy, marketplace, kind, operation):
    target = {"id": "org-a", "organizer_id": "org-a", "profile_id": "org-a"}
    assert policy.authorize("org-a", kind, operation, target) is DENY


def test_missing_target_is_denied(policy, marketplace):
    assert policy.authorize("org-a", EntityKind.EVENT, Operation.READ, None) is DENY


def test_enforce_raises_permission_denied(policy, marketplace):
    policy.enforce("org-a", EntityKind.EVENT, Operation.CREATE, _event_fields("org-a"))
    with pytest.raises(PermissionDenied):
        policy.enforce("spo-b", EntityKind.EVENT, Operation.CREATE, _event_fields("spo-b"))


def test_custom_table_extends_without_new_evaluation_logic(store, marketplace):
    table = {(EntityKind.EVENT, Operation.DELETE): Rule(authenticated)}
    engine = PolicyEngine(store.find, table=table)
    assert engine.authorize("spo-b", EntityKind.EVENT, Operation.DELETE, {"id": "x"}) is ALLOW
    assert engine.authorize("spo-b", EntityKind.EVENT, Operation.READ, {"id": "x"}) is DENY


def test_update_rules_name_their_ownership_column(policy):
    assert policy.rule_for(EntityKind.PROFILE, Operation.UPDATE).owner_field == "id"
    assert policy.rule_for(EntityKind.EVENT, Operation.UPDATE).owner_field == "organizer_id"
    assert policy.rule_for(EntityKind.SPONSOR_OFFER, Operation.UPDATE).owner_field == "profile_id"
    assert policy.rule_for(EntityKind.SPONSOR_EVENT_TYPE, Operation.UPDATE) is None

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.use_cases.create_entity import CreateEntityUseCase
from src.application.use_cases.provision_profile import ProvisionProfileUseCase
from src.application.use_cases.read_entity import ReadEntityUseCase
from src.application.use_cases.update_entity import UpdateEntityUseCase
from src.domain.services.integrity_enforcer import IntegrityEnforcer
from src.domain.services.policy_engine import PolicyEngine
from src.infrastructure.database.entity_store import EntityStore, get_entity_store
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> str | None:
    """Resolve the request's principal; None for anonymous requests.

    Anonymous callers are not rejected here, the policy engine denies them.
    """
    if credentials is None:
        return None
    if not credentials.scheme or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        return auth.validate_token(credentials.credentials).principal_id
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


def get_store() -> EntityStore:
    return get_entity_store()


def get_integrity() -> IntegrityEnforcer:
    return IntegrityEnforcer()


def get_policy(store: Annotated[EntityStore, Depends(get_store)]) -> PolicyEngine:
    return PolicyEngine(store.find)


def get_read_use_case(
    store: Annotated[EntityStore, Depends(get_store)],
    policy: Annotated[PolicyEngine, Depends(get_policy)],
) -> ReadEntityUseCase:
    return ReadEntityUseCase(store, policy)


def get_create_use_case(
    store: Annotated[EntityStore, Depends(get_store)],
    policy: Annotated[PolicyEngine, Depends(get_policy)],
    integrity: Annotated[IntegrityEnforcer, Depends(get_integrity)],
) -> CreateEntityUseCase:
    return CreateEntityUseCase(store, policy, integrity)


def get_update_use_case(
    store: Annotated[EntityStore, Depends(get_store)],
    policy: Annotated[PolicyEngine, Depends(get_policy)],
    integrity: Annotated[IntegrityEnforcer, Depends(get_integrity)],
) -> UpdateEntityUseCase:
    return UpdateEntityUseCase(store, policy, integrity)


def get_provision_use_case(
    store: Annotated[EntityStore, Depends(get_store)],
    integrity: Annotated[IntegrityEnforcer, Depends(get_integrity)],
) -> ProvisionProfileUseCase:
    return ProvisionProfileUseCase(store, integrity)

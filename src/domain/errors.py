"""Error taxonomy shared by the policy, integrity and storage layers.

None of these represent transient conditions; callers never retry them.
"""
from __future__ import annotations


class DomainError(Exception):
    http_status: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_api_dict(self) -> dict[str, str | None]:
        return {"detail": self.message}


class PermissionDenied(DomainError):
    """The Policy Engine refused the operation.

    The message is deliberately uniform so it never reveals whether the row
    exists.
    """

    http_status = 403

    def __init__(self, message: str = "Operation not permitted") -> None:
        super().__init__(message)


class NotFound(DomainError):
    http_status = 404

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} '{entity_id}' not found")
        self.kind = kind
        self.entity_id = entity_id


class ConstraintViolation(DomainError):
    http_status = 422

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_api_dict(self) -> dict[str, str | None]:
        return {"detail": self.message, "field": self.field}

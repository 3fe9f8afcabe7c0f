# storecms/core/errors.py
# Typed errors raised by the services; the API layer maps them to the
# {"error": {code, message, requestId, details?}} envelope.
from __future__ import annotations

from typing import Any, Dict, List, Optional


class CMSError(Exception):
    code: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(CMSError):
    """Malformed input or a state-machine precondition that does not hold."""

    code = "validation_error"
    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, details=[{"field": field, "message": message}])


class ContentValidationError(ValidationError):
    """contentJson failed the shape check; message names the offending block."""

    code = "invalid_content_json"

    def __init__(self, message: str) -> None:
        super().__init__(message, details=[{"field": "contentJson", "message": message}])


class SlugConflictError(CMSError):
    code = "slug_conflict"
    status_code = 409

    def __init__(self, slug: str, entity: str | None = None) -> None:
        super().__init__(f'Slug "{slug}" is already in use')
        self.slug = slug
        self.entity = entity
        self.details = [{"field": "slug", "message": self.message}]


class NotFoundError(CMSError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(CMSError):
    """A concurrent write won a race on a uniqueness rule; the caller may retry."""

    code = "conflict"
    status_code = 409


class PayloadTooLargeError(CMSError):
    code = "payload_too_large"
    status_code = 413


def error_envelope(
    *,
    code: str,
    message: str,
    request_id: str | None,
    details: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": code, "message": message, "requestId": request_id}
    if details:
        body["details"] = details
    return {"error": body}

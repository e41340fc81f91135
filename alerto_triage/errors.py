"""Error taxonomy for the triage pipeline.

Every error carries a stable ``code`` so transport layers (RPC handlers,
callable functions, CLI) can map it without inspecting the message:

- ``invalid-argument``: malformed input (ValidationError)
- ``not-found``: report id does not resolve (NotFound)
- ``unauthenticated``: no caller identity (Unauthenticated)
- ``permission-denied``: caller lacks admin capability (Unauthorized)
- ``failed-precondition``: status change refused by policy (InvalidTransition)
- ``internal``: persistence failure (StorageFailure, InternalError)
"""

from typing import Any, Dict


class TriageError(Exception):
    """Base class for all triage pipeline errors."""

    code: str = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for the caller."""
        return {"code": self.code, "message": self.message}


class ValidationError(TriageError):
    """Report snapshot or call arguments are structurally unreadable."""

    code = "invalid-argument"


class NotFound(TriageError):
    code = "not-found"


class Unauthenticated(TriageError):
    code = "unauthenticated"


class Unauthorized(TriageError):
    code = "permission-denied"


class InvalidTransition(TriageError):
    """Status change rejected by the transition policy."""

    code = "failed-precondition"


class StorageFailure(TriageError):
    """A repository read or write failed."""

    code = "internal"


class InternalError(TriageError):
    """Unexpected failure surfaced to a synchronous caller."""

    code = "internal"

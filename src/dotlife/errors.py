"""Typed domain errors.

Services raise these; the global handler in ``dotlife.middleware.error_handler``
turns them into ``{"detail": ..., "code": ...}`` JSON responses. Raising one
inside a request aborts the surrounding transaction, so nothing is persisted.
"""

from __future__ import annotations


class DotlifeError(Exception):
    """Base class for all errors reported to API callers."""

    code = "error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict[str, str]:
        return {"detail": self.message, "code": self.code}


class UnauthorizedError(DotlifeError):
    code = "unauthorized"
    status_code = 401


class ForbiddenError(DotlifeError):
    code = "forbidden"
    status_code = 403


class NotFoundError(DotlifeError):
    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, identifier: object) -> None:
        super().__init__(f"{resource} '{identifier}' not found")
        self.resource = resource
        self.identifier = identifier


class ConflictError(DotlifeError):
    code = "conflict"
    status_code = 409


class InsufficientBricksError(DotlifeError):
    code = "insufficient_bricks"
    status_code = 400

    def __init__(self, needed: int, available: int) -> None:
        super().__init__(f"Not enough bricks: need {needed}, have {available}")
        self.needed = needed
        self.available = available


class InvalidPlacementError(DotlifeError):
    code = "invalid_placement"
    status_code = 400

    def __init__(self, x: int, y: int, reason: str) -> None:
        super().__init__(f"Cannot place block at ({x}, {y}): {reason}")
        self.x = x
        self.y = y
        self.reason = reason


class EmptyBatchError(DotlifeError):
    code = "empty_batch"
    status_code = 400

    def __init__(self, message: str = "No blocks to confirm") -> None:
        super().__init__(message)


class QuestStateError(DotlifeError):
    """A quest action is not allowed in the quest's current state."""

    code = "quest_state"
    status_code = 409

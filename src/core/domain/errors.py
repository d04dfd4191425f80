"""Domain exceptions.

Adapters translate transport/SDK failures into these; the outer boundary
(`FPSEstimationService.respond`, CLI, HTTP app) translates them into replies.
"""

from __future__ import annotations


class EstimatorError(Exception):
    """Base class for every error raised by the estimation core."""


class EstimationValidationError(EstimatorError):
    """The request lacks a game name, a resolution or a quality preset."""

    def __init__(self, message: str = "Missing fields") -> None:
        super().__init__(message)
        self.message = message


class SoftFallback(EstimatorError):
    """Recoverable provider failure: the caller must use the local estimate."""

    def __init__(self, reason: str, *, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class ProviderHardError(EstimatorError):
    """Non-recoverable provider reply, surfaced with its status and raw body."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"provider returned HTTP {status_code}")
        self.status_code = status_code
        self.detail = detail

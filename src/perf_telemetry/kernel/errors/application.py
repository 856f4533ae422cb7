"""Application-layer errors: cross-cutting concerns at the library surface."""

from __future__ import annotations

from perf_telemetry.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


__all__ = ["ApplicationError"]

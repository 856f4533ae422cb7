"""Infrastructure errors: failures while moving data in or out of the process."""

from __future__ import annotations

from perf_telemetry.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Raised on I/O or encoding failures."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """A payload could not be encoded or decoded."""

    default_code = "serialization_error"


__all__ = ["InfrastructureError", "SerializationError"]

"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   └── ConfigError      (perf_telemetry.config.validation)
    └── InfrastructureError  (infrastructure.py)
        └── SerializationError
"""

from perf_telemetry.kernel.errors.application import ApplicationError
from perf_telemetry.kernel.errors.base import BaseError
from perf_telemetry.kernel.errors.infrastructure import InfrastructureError, SerializationError

__all__ = [
    "ApplicationError",
    "BaseError",
    "InfrastructureError",
    "SerializationError",
]

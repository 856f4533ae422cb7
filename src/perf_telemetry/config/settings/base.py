"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix``; loaders read ``<PREFIX>_<FIELD>`` variables.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def to_dict(self) -> dict[str, Any]:
        """Field values keyed by name, suitable as structured log fields."""
        return dataclasses.asdict(self)


__all__ = ["Settings"]

"""Recorder – response size estimators.

Sizing is best-effort: a sizer returns ``None`` whenever a size is not
meaningful for the result, and the recorder then leaves ``response_size``
unset.
"""
from __future__ import annotations

import json
from typing import Any, Protocol


class ResponseSizer(Protocol):
    """Port: estimate the byte size of an operation's result."""

    def measure(self, result: Any) -> int | None: ...


class JsonResponseSizer:
    """UTF-8 byte length of the JSON encoding of the result.

    Bytes-like results are measured directly.
    """

    def measure(self, result: Any) -> int | None:
        if isinstance(result, (bytes, bytearray, memoryview)):
            return len(result)
        try:
            encoded = json.dumps(result, ensure_ascii=False)
        except (TypeError, ValueError):
            return None
        return len(encoded.encode("utf-8"))


class NullResponseSizer:
    """Skip sizing entirely (large payloads, hot paths)."""

    def measure(self, result: Any) -> int | None:  # noqa: ARG002
        return None


__all__ = ["JsonResponseSizer", "NullResponseSizer", "ResponseSizer"]

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Outcome:
    """Result of a best-effort call: callers branch on ``ok`` instead of catching."""

    ok: bool
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "Outcome":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> "Outcome":
        return cls(ok=False, message=message)

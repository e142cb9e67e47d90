"""Outcome envelope returned by every workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class WorkflowResult:
    success: str | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **extra: Any) -> "WorkflowResult":
        return cls(success=message, extra=extra)

    @classmethod
    def fail(cls, message: str) -> "WorkflowResult":
        return cls(error=message)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        payload: dict[str, Any] = {"success": self.success}
        payload.update(self.extra)
        return payload

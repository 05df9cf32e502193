"""Result types for best-effort side effects"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class BestEffortResult:
    """
    Outcome of a side effect that must never abort its caller.

    Callers may log or inspect it; it is never raised.
    """
    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, value: Any = None) -> "BestEffortResult":
        return cls(ok=True, value=value)

    @classmethod
    def failed(cls, error: BaseException) -> "BestEffortResult":
        return cls(ok=False, error=f"{type(error).__name__}: {error}")

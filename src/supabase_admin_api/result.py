"""
Explicit outcome type for calls into external collaborators.

Handlers and probes never intercept exceptions from the Supabase client or
the SQL pool themselves; they `capture` the awaitable and branch on
`CallResult.ok`.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CallResult(Generic[T]):
    """
    Success-with-value or failure-with-cause.

    Attributes:
        value: The call's return value (only on success)
        error: The exception that ended the call (only on failure)
    """

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> CallResult[T]:
        """Create a successful result."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> CallResult[T]:
        """Create a failed result."""
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def capture(awaitable: Awaitable[T]) -> CallResult[T]:
    """Await `awaitable` and fold its outcome into a CallResult."""
    try:
        return CallResult.success(await awaitable)
    except Exception as exc:
        return CallResult.failure(exc)


__all__ = ["CallResult", "capture"]

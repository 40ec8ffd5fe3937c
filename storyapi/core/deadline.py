"""Bounded-time context handed to persistence collaborators."""

from __future__ import annotations

import time
from dataclasses import dataclass


class DeadlineExceededError(TimeoutError):
    """Raised by a collaborator when its deadline elapsed before it finished."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


@dataclass(frozen=True)
class Deadline:
    """Absolute instant on the monotonic clock after which work must stop."""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=time.monotonic() + max(0.0, seconds))

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self) -> None:
        if self.expired:
            raise DeadlineExceededError()

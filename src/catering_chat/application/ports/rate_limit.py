from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RateLimitResult:
    success: bool
    remaining: int
    reset_in_seconds: int


class RateLimiter(Protocol):
    async def hit(self, identifier: str) -> RateLimitResult: ...

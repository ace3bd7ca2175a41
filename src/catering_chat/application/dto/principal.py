from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    user_id: UUID
    roles: list[str] = field(default_factory=list)

    @property
    def principal_key(self) -> str:
        """Unique key for WS connection registry."""
        return str(self.user_id)

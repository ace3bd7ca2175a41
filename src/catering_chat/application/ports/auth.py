from __future__ import annotations

from typing import Protocol

from catering_chat.application.dto.principal import Principal


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Principal:
        """Return the caller for a bearer token.

        Raises ``jwt.InvalidTokenError`` when the signature, expiry or the
        ``sub`` claim (a user UUID) is not acceptable.
        """

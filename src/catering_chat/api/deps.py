"""FastAPI dependency injection helpers."""
from __future__ import annotations

import logging
from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catering_chat.application.dto.principal import Principal
from catering_chat.application.exceptions import RateLimitedError, UnauthorizedError
from catering_chat.application.ports.auth import TokenVerifier
from catering_chat.application.ports.rate_limit import RateLimiter
from catering_chat.config import settings
from catering_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from catering_chat.infrastructure.auth.jwks_verifier import JWKSVerifier
from catering_chat.infrastructure.db.session import AsyncSessionLocal
from catering_chat.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_verifier)],
) -> Principal:
    if credentials is None:
        raise UnauthorizedError("Giriş yapmalısınız")
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        logger.debug("Token rejected", exc_info=True)
        raise UnauthorizedError("Giriş yapmalısınız") from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


async def enforce_rate_limit(
    principal: CurrentPrincipal,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> Principal:
    result = await limiter.hit(principal.principal_key)
    if not result.success:
        logger.info("Rate limit hit for %s", principal.principal_key)
        raise RateLimitedError("Çok fazla istek")
    return principal


RateLimitedPrincipal = Annotated[Principal, Depends(enforce_rate_limit)]

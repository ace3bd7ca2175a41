from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class CamelModel(BaseModel):
    """Request/response model that accepts both camelCase aliases and field names."""

    model_config = ConfigDict(populate_by_name=True)


class Envelope(BaseModel, Generic[T]):
    ok: Literal[True] = True
    data: T


class ErrorBody(BaseModel):
    code: str
    message: str


class ErrorEnvelope(BaseModel):
    ok: Literal[False] = False
    error: ErrorBody
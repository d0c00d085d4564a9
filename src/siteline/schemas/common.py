"""Shared response schemas and input coercion helpers."""

from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


def blank_to_none(v: Any) -> Any:
    """Form clients send "" for cleared optional fields."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


def strip_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v

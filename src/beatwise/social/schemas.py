"""Schemas for identity linkage callbacks."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from beatwise.schemas import WalletAddress


class Platform(str, Enum):
    X = "x"
    TELEGRAM = "telegram"
    DISCORD = "discord"
    EMAIL = "email"
    SPOTIFY = "spotify"


# Keys owned by the validated fields; ``extra`` cannot supply them.
_PROFILE_KEYS = frozenset({"id", "username", "display_name"})


class LinkIdentityRequest(BaseModel):
    """Platform profile sent after the client finished the platform's OAuth flow."""

    wallet_address: WalletAddress
    id: str = Field(..., min_length=1, max_length=128)
    username: str | None = Field(None, max_length=128)
    display_name: str | None = Field(None, max_length=128)
    extra: dict[str, Any] = {}

    def identity(self) -> dict[str, Any]:
        data: dict[str, Any] = {k: v for k, v in self.extra.items() if k not in _PROFILE_KEYS}
        data["id"] = self.id
        if self.username:
            data["username"] = self.username
        if self.display_name:
            data["display_name"] = self.display_name
        return data


class LinkIdentityResponse(BaseModel):
    wallet_address: str
    platform: Platform
    identity: dict[str, Any]

"""Request/response schemas for wallet login."""

from __future__ import annotations

from pydantic import BaseModel, Field

from beatwise.schemas import WalletAddress


class ChallengeRequest(BaseModel):
    wallet_address: WalletAddress


class ChallengeResponse(BaseModel):
    nonce: str
    timestamp: str
    message: str
    expires_in: int


class VerifyRequest(BaseModel):
    wallet_address: WalletAddress
    nonce: str = Field(..., min_length=1, max_length=64)
    signature: str = Field(..., min_length=1, max_length=200)


class VerifyResponse(BaseModel):
    wallet_address: str
    invite_code: str
    total_points: int
    is_new_user: bool

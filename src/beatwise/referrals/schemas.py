"""Pydantic models for referral endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from beatwise.schemas import WalletAddress


class ApplyReferralRequest(BaseModel):
    wallet_address: WalletAddress
    invite_code: str = Field(..., min_length=1, max_length=32)


class ApplyReferralResponse(BaseModel):
    referrer: str
    referred: str
    reward: int


class ReferralInfoResponse(BaseModel):
    wallet_address: str
    invite_code: str
    invited_by: str | None = None
    invited_count: int
    invited_users: list[str]
    referral_points: int

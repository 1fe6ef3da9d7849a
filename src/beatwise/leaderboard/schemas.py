"""Pydantic models for leaderboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from beatwise.accounts.models import Scope


class LeaderboardEntryResponse(BaseModel):
    rank: int
    wallet_address: str
    score: int
    game_points: int
    referral_points: int
    social_points: int
    total_points: int
    high_score: int


class LeaderboardResponse(BaseModel):
    scope: Scope
    page: int
    per_page: int
    total: int
    entries: list[LeaderboardEntryResponse]


class RankResponse(BaseModel):
    wallet_address: str
    scope: Scope
    rank: int
    score: int
    total_accounts: int

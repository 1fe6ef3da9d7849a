"""Pydantic response models for account endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from beatwise.accounts.models import Account


class AccountResponse(BaseModel):
    wallet_address: str
    invite_code: str
    game_points: int
    referral_points: int
    social_points: int
    total_points: int
    high_score: int
    daily_games_played: int
    last_game_date: date | None = None
    completed_tasks: list[str] = []
    external_identities: dict[str, dict[str, Any]] = {}
    invited_by: str = ""
    invited_count: int = 0
    is_whitelisted: bool = False
    airdropped: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_account(cls, account: Account) -> AccountResponse:
        return cls(
            wallet_address=account.wallet_address,
            invite_code=account.invite_code,
            game_points=account.game_points,
            referral_points=account.referral_points,
            social_points=account.social_points,
            total_points=account.total_points,
            high_score=account.high_score,
            daily_games_played=account.daily_games_played,
            last_game_date=account.last_game_date,
            completed_tasks=sorted(account.completed_tasks),
            external_identities=account.external_identities,
            invited_by=account.invited_by,
            invited_count=len(account.invited_users),
            is_whitelisted=account.is_whitelisted,
            airdropped=account.airdropped,
            created_at=account.created_at,
        )

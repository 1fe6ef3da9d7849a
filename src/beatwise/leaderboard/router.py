"""Leaderboard endpoints. Positions are snapshots, not live values."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from beatwise.accounts.models import Scope
from beatwise.accounts.store import AccountStore
from beatwise.config import get_settings
from beatwise.dependencies import get_account_store
from beatwise.leaderboard.schemas import LeaderboardEntryResponse, LeaderboardResponse, RankResponse
from beatwise.leaderboard.service import rank, top_n
from beatwise.schemas import WalletAddress

router = APIRouter(prefix="/api/v1/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    scope: Scope = Query(Scope.TOTAL),  # noqa: B008
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1),
    store: AccountStore = Depends(get_account_store),  # noqa: B008
):
    max_page_size = get_settings().leaderboard_max_page_size
    if per_page > max_page_size:
        raise HTTPException(status_code=400, detail=f"per_page must be <= {max_page_size}")

    result = await top_n(store, scope, page, per_page)
    return LeaderboardResponse(
        scope=result.scope,
        page=result.page,
        per_page=result.per_page,
        total=result.total,
        entries=[
            LeaderboardEntryResponse(
                rank=e.rank,
                wallet_address=e.wallet_address,
                score=e.score,
                game_points=e.account.game_points,
                referral_points=e.account.referral_points,
                social_points=e.account.social_points,
                total_points=e.account.total_points,
                high_score=e.account.high_score,
            )
            for e in result.entries
        ],
    )


@router.get("/rank/{wallet}", response_model=RankResponse)
async def get_rank(
    wallet: WalletAddress,
    scope: Scope = Query(Scope.TOTAL),  # noqa: B008
    store: AccountStore = Depends(get_account_store),  # noqa: B008
):
    result = await rank(store, wallet, scope)
    return RankResponse(
        wallet_address=result.wallet_address,
        scope=result.scope,
        rank=result.rank,
        score=result.score,
        total_accounts=result.total_accounts,
    )

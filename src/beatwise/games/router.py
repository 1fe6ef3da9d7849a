"""Game endpoints: score submission, stats, daily quota and admin reset."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from beatwise.accounts.service import get_account
from beatwise.accounts.store import AccountStore
from beatwise.config import get_settings
from beatwise.dependencies import get_account_store, require_admin
from beatwise.games.quota import MAX_GAMES_PER_DAY, record_play
from beatwise.games.schemas import (
    CanPlayResponse,
    GameStatsResponse,
    RecordPlayRequest,
    RecordPlayResponse,
    ResetResponse,
    SubmitScoreRequest,
    SubmitScoreResponse,
)
from beatwise.games.stats import game_stats
from beatwise.ledger.points import reset_game_points, submit_game_result
from beatwise.schemas import WalletAddress

router = APIRouter(prefix="/api/v1/game", tags=["Game"])


@router.post("/points", response_model=SubmitScoreResponse)
async def submit_points(body: SubmitScoreRequest, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    """Credit a finished game's score."""
    result = await submit_game_result(
        store, body.wallet_address, body.score, attempts=get_settings().store_max_attempts,
    )
    return SubmitScoreResponse(
        wallet_address=result.wallet_address,
        points_added=result.points_added,
        previous_game_points=result.previous_game_points,
        game_points=result.game_points,
        total_points=result.total_points,
        high_score=result.high_score,
        is_new_high_score=result.is_new_high_score,
    )


@router.get("/stats/{wallet}", response_model=GameStatsResponse)
async def get_stats(wallet: WalletAddress, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    stats = game_stats(await get_account(store, wallet))
    return GameStatsResponse(
        wallet_address=stats.wallet_address,
        game_points=stats.game_points,
        high_score=stats.high_score,
        total_points=stats.total_points,
        games_played_today=stats.games_played_today,
        games_remaining=stats.games_remaining,
        can_play=stats.can_play,
    )


@router.get("/can-play/{wallet}", response_model=CanPlayResponse)
async def get_can_play(wallet: WalletAddress, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    """Quota check. Read-only: the day rollover is persisted by the next recorded play."""
    stats = game_stats(await get_account(store, wallet))
    return CanPlayResponse(
        wallet_address=stats.wallet_address,
        can_play=stats.can_play,
        games_played_today=stats.games_played_today,
        games_remaining=stats.games_remaining,
        max_games_per_day=MAX_GAMES_PER_DAY,
    )


@router.post("/record-play", response_model=RecordPlayResponse)
async def post_record_play(body: RecordPlayRequest, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    played = await record_play(store, body.wallet_address, attempts=get_settings().store_max_attempts)
    return RecordPlayResponse(
        wallet_address=played.wallet_address,
        games_played_today=played.games_played_today,
        games_remaining=played.games_remaining,
        game_date=played.game_date,
    )


@router.delete("/reset/{wallet}", response_model=ResetResponse, dependencies=[Depends(require_admin)])
async def reset_points(wallet: WalletAddress, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    """Admin: zero game points. The high score is kept."""
    result = await reset_game_points(store, wallet, attempts=get_settings().store_max_attempts)
    return ResetResponse(
        wallet_address=result.wallet_address,
        previous_game_points=result.previous_game_points,
        game_points=result.game_points,
        high_score=result.high_score,
        total_points=result.total_points,
    )

"""Pydantic models for game endpoints."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, StrictInt

from beatwise.schemas import WalletAddress


class SubmitScoreRequest(BaseModel):
    wallet_address: WalletAddress
    score: StrictInt


class SubmitScoreResponse(BaseModel):
    wallet_address: str
    points_added: int
    previous_game_points: int
    game_points: int
    total_points: int
    high_score: int
    is_new_high_score: bool


class GameStatsResponse(BaseModel):
    wallet_address: str
    game_points: int
    high_score: int
    total_points: int
    games_played_today: int
    games_remaining: int
    can_play: bool


class CanPlayResponse(BaseModel):
    wallet_address: str
    can_play: bool
    games_played_today: int
    games_remaining: int
    max_games_per_day: int


class RecordPlayRequest(BaseModel):
    wallet_address: WalletAddress


class RecordPlayResponse(BaseModel):
    wallet_address: str
    games_played_today: int
    games_remaining: int
    game_date: date


class ResetResponse(BaseModel):
    wallet_address: str
    previous_game_points: int
    game_points: int
    high_score: int
    total_points: int

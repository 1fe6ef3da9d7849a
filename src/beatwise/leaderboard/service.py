"""Ranking engine.

Ranks are count-based: 1 + the number of accounts with a strictly greater
score in the scope, so tied accounts share a rank. Pages are ordered by score
descending with creation order as the tie-break, and carry page-local
positions (offset + index + 1). Neither is linearizable with concurrent
writes; treat results as a snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass

from beatwise.accounts.models import Account, Scope
from beatwise.accounts.service import get_account
from beatwise.accounts.store import AccountStore


@dataclass(frozen=True)
class RankResult:
    wallet_address: str
    scope: Scope
    rank: int
    score: int
    total_accounts: int


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    wallet_address: str
    score: int
    account: Account


@dataclass(frozen=True)
class LeaderboardPage:
    scope: Scope
    page: int
    per_page: int
    total: int
    entries: list[LeaderboardEntry]


async def rank(store: AccountStore, wallet_address: str, scope: Scope = Scope.TOTAL) -> RankResult:
    account = await get_account(store, wallet_address)
    score = account.score(scope)
    ahead = await store.count(scope, greater_than=score)
    total = await store.count()
    return RankResult(
        wallet_address=account.wallet_address,
        scope=scope,
        rank=ahead + 1,
        score=score,
        total_accounts=total,
    )


async def top_n(store: AccountStore, scope: Scope = Scope.TOTAL, page: int = 1, per_page: int = 10) -> LeaderboardPage:
    """One page of the leaderboard for ``scope``."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")

    offset = (page - 1) * per_page
    accounts = await store.find_ranked(scope, skip=offset, limit=per_page)
    total = await store.count()
    entries = [
        LeaderboardEntry(
            rank=offset + i + 1,
            wallet_address=acc.wallet_address,
            score=acc.score(scope),
            account=acc,
        )
        for i, acc in enumerate(accounts)
    ]
    return LeaderboardPage(scope=scope, page=page, per_page=per_page, total=total, entries=entries)

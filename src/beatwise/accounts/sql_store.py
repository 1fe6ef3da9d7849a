"""SQLAlchemy-backed account store.

Every call runs in its own short transaction. ``save`` is a conditional
UPDATE on the row version, so two writers that read the same version cannot
both succeed.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from beatwise.accounts.models import Account, Scope
from beatwise.accounts.store import InviteCodeTaken
from beatwise.db.models import AccountRow
from beatwise.ledger.errors import VersionConflict

_MUTABLE_FIELDS = (
    "game_points",
    "referral_points",
    "social_points",
    "high_score",
    "daily_games_played",
    "last_game_date",
    "completed_tasks",
    "external_identities",
    "invited_by",
    "invited_users",
    "is_whitelisted",
    "airdropped",
)


def score_expression(scope: Scope) -> ColumnElement[int]:
    """Column (or derived sum) a scope ranks on."""
    if scope is Scope.TOTAL:
        return AccountRow.game_points + AccountRow.referral_points + AccountRow.social_points
    if scope is Scope.HIGH_SCORE:
        return AccountRow.high_score
    return getattr(AccountRow, f"{scope.value}_points")


def _to_account(row: AccountRow) -> Account:
    return Account(
        wallet_address=row.wallet_address,
        invite_code=row.invite_code,
        game_points=row.game_points,
        referral_points=row.referral_points,
        social_points=row.social_points,
        high_score=row.high_score,
        daily_games_played=row.daily_games_played,
        last_game_date=row.last_game_date,
        completed_tasks=set(row.completed_tasks or []),
        external_identities=dict(row.external_identities or {}),
        invited_by=row.invited_by or "",
        invited_users=list(row.invited_users or []),
        is_whitelisted=row.is_whitelisted,
        airdropped=row.airdropped,
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def _column_values(account: Account) -> dict[str, object]:
    values = {name: getattr(account, name) for name in _MUTABLE_FIELDS}
    values["completed_tasks"] = sorted(account.completed_tasks)
    values["invited_users"] = list(account.invited_users)
    values["external_identities"] = dict(account.external_identities)
    return values


class SqlAccountStore:
    """AccountStore over the ``accounts`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_one(self, wallet_address: str) -> Account | None:
        async with self._session_factory() as session:
            row = await session.get(AccountRow, wallet_address)
            return _to_account(row) if row else None

    async def find_by_invite_code(self, invite_code: str) -> Account | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AccountRow).where(AccountRow.invite_code == invite_code)
            )
            row = result.scalar_one_or_none()
            return _to_account(row) if row else None

    async def create(self, account: Account) -> tuple[Account, bool]:
        now = datetime.now(timezone.utc)
        row = AccountRow(
            wallet_address=account.wallet_address,
            invite_code=account.invite_code,
            created_at=account.created_at or now,
            updated_at=now,
            version=1,
            **_column_values(account),
        )
        async with self._session_factory() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                existing = await session.get(AccountRow, account.wallet_address)
                if existing is not None:
                    return _to_account(existing), False
                raise InviteCodeTaken(account.invite_code) from None
            return _to_account(row), True

    async def save(self, account: Account) -> Account:
        now = datetime.now(timezone.utc)
        async with self._session_factory() as session:
            result = await session.execute(
                update(AccountRow)
                .where(
                    AccountRow.wallet_address == account.wallet_address,
                    AccountRow.version == account.version,
                )
                .values(
                    **_column_values(account),
                    updated_at=now,
                    version=AccountRow.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                raise VersionConflict(account.wallet_address, account.version)
            await session.commit()

        saved = account.copy()
        saved.version = account.version + 1
        saved.updated_at = now
        return saved

    async def count(self, scope: Scope | None = None, greater_than: int | None = None) -> int:
        query = select(func.count()).select_from(AccountRow)
        if scope is not None and greater_than is not None:
            query = query.where(score_expression(scope) > greater_than)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    async def find_ranked(self, scope: Scope, skip: int, limit: int) -> list[Account]:
        query = (
            select(AccountRow)
            .order_by(
                score_expression(scope).desc(),
                AccountRow.created_at.asc(),
                AccountRow.wallet_address.asc(),
            )
            .offset(skip)
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return [_to_account(row) for row in result.scalars()]

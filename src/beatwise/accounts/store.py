"""Account storage contract and the in-process implementation.

Stores hand out copies: callers mutate their copy and hand it back to
``save``, which only succeeds if nobody else saved the same account in between
(optimistic concurrency on ``Account.version``).
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timezone
from typing import Protocol

from beatwise.accounts.models import Account, Scope
from beatwise.ledger.errors import VersionConflict


class InviteCodeTaken(Exception):
    """Raised by ``create`` when the candidate invite code is already in use."""


class AccountStore(Protocol):
    async def find_one(self, wallet_address: str) -> Account | None: ...

    async def find_by_invite_code(self, invite_code: str) -> Account | None: ...

    async def create(self, account: Account) -> tuple[Account, bool]:
        """Insert unless the wallet exists. Returns (account, created)."""
        ...

    async def save(self, account: Account) -> Account:
        """Persist if ``account.version`` is current, else raise VersionConflict."""
        ...

    async def count(self, scope: Scope | None = None, greater_than: int | None = None) -> int: ...

    async def find_ranked(self, scope: Scope, skip: int, limit: int) -> list[Account]: ...


class InMemoryAccountStore:
    """Process-local store with the same contract as the SQL store."""

    def __init__(self) -> None:
        self._records: dict[str, Account] = {}
        self._order: dict[str, int] = {}
        self._sequence = itertools.count()
        self._lock = asyncio.Lock()

    async def find_one(self, wallet_address: str) -> Account | None:
        record = self._records.get(wallet_address)
        return record.copy() if record else None

    async def find_by_invite_code(self, invite_code: str) -> Account | None:
        for record in self._records.values():
            if record.invite_code and record.invite_code == invite_code:
                return record.copy()
        return None

    async def create(self, account: Account) -> tuple[Account, bool]:
        async with self._lock:
            existing = self._records.get(account.wallet_address)
            if existing is not None:
                return existing.copy(), False
            if account.invite_code and any(
                r.invite_code == account.invite_code for r in self._records.values()
            ):
                raise InviteCodeTaken(account.invite_code)

            now = datetime.now(timezone.utc)
            stored = account.copy()
            stored.created_at = stored.created_at or now
            stored.updated_at = now
            stored.version = 1
            self._records[stored.wallet_address] = stored
            self._order[stored.wallet_address] = next(self._sequence)
            return stored.copy(), True

    async def save(self, account: Account) -> Account:
        async with self._lock:
            current = self._records.get(account.wallet_address)
            if current is None or current.version != account.version:
                raise VersionConflict(account.wallet_address, account.version)

            stored = account.copy()
            stored.version = current.version + 1
            stored.created_at = current.created_at
            stored.updated_at = datetime.now(timezone.utc)
            self._records[stored.wallet_address] = stored
            return stored.copy()

    async def count(self, scope: Scope | None = None, greater_than: int | None = None) -> int:
        if scope is None or greater_than is None:
            return len(self._records)
        return sum(1 for r in self._records.values() if r.score(scope) > greater_than)

    async def find_ranked(self, scope: Scope, skip: int, limit: int) -> list[Account]:
        ordered = sorted(
            self._records.values(),
            key=lambda r: (-r.score(scope), self._order[r.wallet_address]),
        )
        return [r.copy() for r in ordered[skip:skip + limit]]

"""Points ledger: credits, game results, resets and the retry loop."""

from __future__ import annotations

import asyncio

import pytest

from beatwise.accounts.models import Account, PointCategory
from beatwise.accounts.service import find_or_create_account, get_account
from beatwise.accounts.store import InMemoryAccountStore
from beatwise.ledger.errors import Conflict, InvalidAmount, NotFound, VersionConflict
from beatwise.ledger.mutation import apply_to_account
from beatwise.ledger.points import credit, reset_game_points, submit_game_result
from tests.conftest import WALLET_A


class AlwaysStaleStore(InMemoryAccountStore):
    """Every save loses the race."""

    def __init__(self) -> None:
        super().__init__()
        self.save_calls = 0

    async def save(self, account: Account) -> Account:
        self.save_calls += 1
        raise VersionConflict(account.wallet_address, account.version)


class StaleOnceStore(InMemoryAccountStore):
    """First save loses the race, later saves go through."""

    def __init__(self) -> None:
        super().__init__()
        self.save_calls = 0

    async def save(self, account: Account) -> Account:
        self.save_calls += 1
        if self.save_calls == 1:
            raise VersionConflict(account.wallet_address, account.version)
        return await super().save(account)


class TestCredit:
    @pytest.mark.asyncio
    async def test_credit_each_category(self, store):
        await find_or_create_account(store, WALLET_A)

        assert await credit(store, WALLET_A, PointCategory.GAME, 10) == 10
        assert await credit(store, WALLET_A, PointCategory.REFERRAL, 20) == 30
        assert await credit(store, WALLET_A, PointCategory.SOCIAL, 5) == 35

        account = await get_account(store, WALLET_A)
        assert (account.game_points, account.referral_points, account.social_points) == (10, 20, 5)
        assert account.total_points == account.game_points + account.referral_points + account.social_points

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5, True, 1.5, "10", None])
    async def test_invalid_amount_leaves_counters(self, store, amount):
        await find_or_create_account(store, WALLET_A)
        await credit(store, WALLET_A, PointCategory.GAME, 7)

        with pytest.raises(InvalidAmount):
            await credit(store, WALLET_A, PointCategory.GAME, amount)

        account = await get_account(store, WALLET_A)
        assert account.game_points == 7
        assert account.total_points == 7

    @pytest.mark.asyncio
    async def test_unknown_account(self, store):
        with pytest.raises(NotFound):
            await credit(store, WALLET_A, PointCategory.SOCIAL, 1)

    @pytest.mark.asyncio
    async def test_wallet_case_insensitive(self, store):
        await find_or_create_account(store, WALLET_A)
        await credit(store, WALLET_A.upper().replace("0X", "0x"), PointCategory.GAME, 3)
        assert (await get_account(store, WALLET_A)).game_points == 3

    @pytest.mark.asyncio
    async def test_concurrent_credits_all_land(self, store):
        await find_or_create_account(store, WALLET_A)
        await asyncio.gather(*(credit(store, WALLET_A, PointCategory.GAME, 1, attempts=50) for _ in range(10)))
        assert (await get_account(store, WALLET_A)).game_points == 10


class TestRetryLoop:
    @pytest.mark.asyncio
    async def test_conflict_after_bounded_attempts(self):
        store = AlwaysStaleStore()
        await find_or_create_account(store, WALLET_A)

        with pytest.raises(Conflict):
            await credit(store, WALLET_A, PointCategory.GAME, 5)
        assert store.save_calls == 3

    @pytest.mark.asyncio
    async def test_retry_recovers_from_one_conflict(self):
        store = StaleOnceStore()
        await find_or_create_account(store, WALLET_A)

        assert await credit(store, WALLET_A, PointCategory.SOCIAL, 5) == 5
        assert store.save_calls == 2

    @pytest.mark.asyncio
    async def test_mutation_error_saves_nothing(self, store):
        await find_or_create_account(store, WALLET_A)
        before = await get_account(store, WALLET_A)

        def _boom(account: Account) -> None:
            account.game_points = 999
            raise InvalidAmount()

        with pytest.raises(InvalidAmount):
            await apply_to_account(store, WALLET_A, _boom)
        after = await get_account(store, WALLET_A)
        assert after.game_points == 0
        assert after.version == before.version


class TestGameResults:
    @pytest.mark.asyncio
    async def test_high_score_only_moves_up(self, store):
        await find_or_create_account(store, WALLET_A)

        first = await submit_game_result(store, WALLET_A, 300)
        assert first.is_new_high_score
        assert first.high_score == 300

        second = await submit_game_result(store, WALLET_A, 100)
        assert not second.is_new_high_score
        assert second.high_score == 300
        assert second.game_points == 400
        assert second.previous_game_points == 300

    @pytest.mark.asyncio
    async def test_zero_score_rejected(self, store):
        await find_or_create_account(store, WALLET_A)
        with pytest.raises(InvalidAmount):
            await submit_game_result(store, WALLET_A, 0)


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_keeps_high_score_and_other_counters(self, store):
        await find_or_create_account(store, WALLET_A)
        await submit_game_result(store, WALLET_A, 250)
        await credit(store, WALLET_A, PointCategory.SOCIAL, 40)

        result = await reset_game_points(store, WALLET_A)

        assert result.previous_game_points == 250
        assert result.game_points == 0
        assert result.high_score == 250
        assert result.total_points == 40

    @pytest.mark.asyncio
    async def test_reset_unknown_account(self, store):
        with pytest.raises(NotFound):
            await reset_game_points(store, WALLET_A)

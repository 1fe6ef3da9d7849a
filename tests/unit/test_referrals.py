"""Referral graph: one referrer per account, referrer-only reward, resumable."""

from __future__ import annotations

import pytest

from beatwise.accounts.models import Account
from beatwise.accounts.service import find_or_create_account, get_account
from beatwise.accounts.store import InMemoryAccountStore
from beatwise.ledger.errors import AlreadyReferred, InvalidCode, NotFound, SelfReferral
from beatwise.referrals.service import REFERRAL_REWARD, apply_referral, referral_info
from tests.conftest import WALLET_A, WALLET_B, WALLET_C


class FailingReferrerStore(InMemoryAccountStore):
    """Fails saves for one wallet until ``healed`` is set."""

    def __init__(self, failing_wallet: str) -> None:
        super().__init__()
        self.failing_wallet = failing_wallet
        self.healed = False

    async def save(self, account: Account) -> Account:
        if account.wallet_address == self.failing_wallet and not self.healed:
            raise ConnectionError("storage unavailable")
        return await super().save(account)


class TestApplyReferral:
    @pytest.mark.asyncio
    async def test_rewards_referrer_only(self, store, accounts):
        result = await apply_referral(store, WALLET_A, accounts[WALLET_B])

        assert result.referrer == WALLET_B
        assert result.reward == REFERRAL_REWARD
        referred = await get_account(store, WALLET_A)
        referrer = await get_account(store, WALLET_B)
        assert referred.invited_by == WALLET_B
        assert referred.total_points == 0
        assert referrer.invited_users == [WALLET_A]
        assert referrer.referral_points == REFERRAL_REWARD

    @pytest.mark.asyncio
    async def test_second_code_rejected(self, store, accounts):
        await apply_referral(store, WALLET_A, accounts[WALLET_B])

        with pytest.raises(AlreadyReferred):
            await apply_referral(store, WALLET_A, accounts[WALLET_C])
        with pytest.raises(AlreadyReferred):
            await apply_referral(store, WALLET_A, accounts[WALLET_B])

        referrer = await get_account(store, WALLET_B)
        assert referrer.invited_users.count(WALLET_A) == 1
        assert referrer.referral_points == REFERRAL_REWARD
        assert (await get_account(store, WALLET_C)).referral_points == 0

    @pytest.mark.asyncio
    async def test_self_referral(self, store, accounts):
        with pytest.raises(SelfReferral):
            await apply_referral(store, WALLET_A, accounts[WALLET_A])
        assert (await get_account(store, WALLET_A)).invited_by == ""

    @pytest.mark.asyncio
    async def test_unknown_code(self, store, accounts):
        with pytest.raises(InvalidCode):
            await apply_referral(store, WALLET_A, "ZZZZZZZZ")

    @pytest.mark.asyncio
    async def test_code_is_case_insensitive(self, store, accounts):
        result = await apply_referral(store, WALLET_A, f"  {accounts[WALLET_B].lower()} ")
        assert result.referrer == WALLET_B

    @pytest.mark.asyncio
    async def test_unknown_referred_account(self, store, accounts):
        with pytest.raises(NotFound):
            await apply_referral(store, "0x" + "d4" * 20, accounts[WALLET_B])


@pytest.mark.asyncio
async def test_resume_finishes_only_referrer_side():
    store = FailingReferrerStore(WALLET_B)
    await find_or_create_account(store, WALLET_A)
    referrer, _ = await find_or_create_account(store, WALLET_B)

    with pytest.raises(ConnectionError):
        await apply_referral(store, WALLET_A, referrer.invite_code)

    half_done = await get_account(store, WALLET_A)
    assert half_done.invited_by == WALLET_B
    assert (await get_account(store, WALLET_B)).referral_points == 0

    store.healed = True
    result = await apply_referral(store, WALLET_A, referrer.invite_code)

    assert result.resumed
    after = await get_account(store, WALLET_B)
    assert after.invited_users == [WALLET_A]
    assert after.referral_points == REFERRAL_REWARD
    assert (await get_account(store, WALLET_A)).version == half_done.version

    with pytest.raises(AlreadyReferred):
        await apply_referral(store, WALLET_A, referrer.invite_code)
    assert (await get_account(store, WALLET_B)).referral_points == REFERRAL_REWARD


class TestReferralInfo:
    @pytest.mark.asyncio
    async def test_counts_invites(self, store, accounts):
        await apply_referral(store, WALLET_A, accounts[WALLET_C])
        await apply_referral(store, WALLET_B, accounts[WALLET_C])

        info = await referral_info(store, WALLET_C)
        assert info.invite_code == accounts[WALLET_C]
        assert info.invited_count == 2
        assert info.invited_users == [WALLET_A, WALLET_B]
        assert info.referral_points == 2 * REFERRAL_REWARD
        assert info.invited_by == ""

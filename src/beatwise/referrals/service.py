"""Referral graph: invite-code redemption and the referrer reward.

Applying a referral writes two accounts that cannot be updated atomically
together. The referred account is written first (``invited_by``), then the
referrer (``invited_users`` + reward). If the second write fails, repeating
the same request finds ``invited_by`` already pointing at the owner of the
code while the referrer does not list the referred wallet yet, and finishes
only the referrer side.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from beatwise.accounts.invite_codes import normalize_invite_code
from beatwise.accounts.models import Account, PointCategory
from beatwise.accounts.service import get_account
from beatwise.accounts.store import AccountStore
from beatwise.ledger.errors import AlreadyReferred, InvalidCode, SelfReferral
from beatwise.ledger.mutation import DEFAULT_ATTEMPTS, apply_to_account
from beatwise.ledger.points import credit_account

logger = structlog.get_logger()

# Only the referrer is rewarded.
REFERRAL_REWARD = 100


@dataclass(frozen=True)
class ReferralResult:
    referrer: str
    referred: str
    reward: int
    referrer_referral_points: int
    resumed: bool = False


@dataclass(frozen=True)
class ReferralInfo:
    wallet_address: str
    invite_code: str
    invited_by: str
    invited_users: list[str]
    referral_points: int

    @property
    def invited_count(self) -> int:
        return len(self.invited_users)


async def _pending_referrer(store: AccountStore, referred: Account, code: str) -> Account | None:
    """The referrer whose side of a half-applied referral is still missing."""
    referrer = await store.find_one(referred.invited_by)
    if referrer is None or referrer.invite_code != code:
        return None
    if referred.wallet_address in referrer.invited_users:
        return None
    return referrer


async def apply_referral(
    store: AccountStore,
    wallet_address: str,
    invite_code: str,
    attempts: int = DEFAULT_ATTEMPTS,
) -> ReferralResult:
    """Redeem ``invite_code`` for the account at ``wallet_address``.

    Raises:
        NotFound: the referred account does not exist.
        AlreadyReferred: the account already has a referrer.
        InvalidCode: no account owns ``invite_code``.
        SelfReferral: the code belongs to the same account.
    """
    code = normalize_invite_code(invite_code or "")
    referred = await get_account(store, wallet_address)

    resumed = False
    if referred.invited_by:
        referrer = await _pending_referrer(store, referred, code)
        if referrer is None:
            raise AlreadyReferred(f"Account {referred.wallet_address} was already referred")
        resumed = True
        logger.info("referral_resume", referred=referred.wallet_address, referrer=referrer.wallet_address)
    else:
        referrer = await store.find_by_invite_code(code) if code else None
        if referrer is None:
            raise InvalidCode(f"Invite code {code!r} not found")
        if referrer.wallet_address == referred.wallet_address:
            raise SelfReferral()

        referrer_wallet = referrer.wallet_address

        def _set_inviter(acc: Account) -> None:
            if acc.invited_by:
                raise AlreadyReferred(f"Account {acc.wallet_address} was already referred")
            acc.invited_by = referrer_wallet

        await apply_to_account(store, referred.wallet_address, _set_inviter, attempts)

    referred_wallet = referred.wallet_address

    def _reward_referrer(acc: Account) -> int:
        if referred_wallet in acc.invited_users:
            return 0
        acc.invited_users.append(referred_wallet)
        credit_account(acc, PointCategory.REFERRAL, REFERRAL_REWARD)
        return REFERRAL_REWARD

    saved_referrer, reward = await apply_to_account(store, referrer.wallet_address, _reward_referrer, attempts)

    logger.info(
        "referral_applied",
        referrer=saved_referrer.wallet_address,
        referred=referred_wallet,
        reward=reward,
        resumed=resumed,
    )
    return ReferralResult(
        referrer=saved_referrer.wallet_address,
        referred=referred_wallet,
        reward=reward,
        referrer_referral_points=saved_referrer.referral_points,
        resumed=resumed,
    )


async def referral_info(store: AccountStore, wallet_address: str) -> ReferralInfo:
    account = await get_account(store, wallet_address)
    return ReferralInfo(
        wallet_address=account.wallet_address,
        invite_code=account.invite_code,
        invited_by=account.invited_by,
        invited_users=list(account.invited_users),
        referral_points=account.referral_points,
    )

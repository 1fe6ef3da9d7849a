"""Referral endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from beatwise.accounts.store import AccountStore
from beatwise.config import get_settings
from beatwise.dependencies import get_account_store
from beatwise.referrals.schemas import ApplyReferralRequest, ApplyReferralResponse, ReferralInfoResponse
from beatwise.referrals.service import apply_referral, referral_info
from beatwise.schemas import WalletAddress

router = APIRouter(prefix="/api/v1/referrals", tags=["Referrals"])


@router.post("/apply", response_model=ApplyReferralResponse)
async def apply(body: ApplyReferralRequest, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    """Redeem an invite code. Only the referrer is rewarded."""
    result = await apply_referral(
        store, body.wallet_address, body.invite_code, attempts=get_settings().store_max_attempts,
    )
    return ApplyReferralResponse(referrer=result.referrer, referred=result.referred, reward=result.reward)


@router.get("/{wallet}", response_model=ReferralInfoResponse)
async def get_referrals(wallet: WalletAddress, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    info = await referral_info(store, wallet)
    return ReferralInfoResponse(
        wallet_address=info.wallet_address,
        invite_code=info.invite_code,
        invited_by=info.invited_by or None,
        invited_count=info.invited_count,
        invited_users=info.invited_users,
        referral_points=info.referral_points,
    )

"""Identity linkage callbacks: store platform profiles on the account."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from beatwise.accounts.service import link_identity
from beatwise.accounts.store import AccountStore
from beatwise.dependencies import get_account_store
from beatwise.social.schemas import LinkIdentityRequest, LinkIdentityResponse, Platform

router = APIRouter(prefix="/api/v1/social", tags=["Social"])


@router.post("/{platform}/link", response_model=LinkIdentityResponse)
async def link_platform(
    platform: Platform,
    body: LinkIdentityRequest,
    store: AccountStore = Depends(get_account_store),  # noqa: B008
):
    """Link a platform identity. Creates the account if the wallet is new; grants no points."""
    account = await link_identity(store, body.wallet_address, platform.value, body.identity())
    return LinkIdentityResponse(
        wallet_address=account.wallet_address,
        platform=platform,
        identity=account.external_identities[platform.value],
    )

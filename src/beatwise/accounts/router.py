"""Account lookup endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from beatwise.accounts.schemas import AccountResponse
from beatwise.accounts.service import get_account
from beatwise.accounts.store import AccountStore
from beatwise.dependencies import get_account_store
from beatwise.schemas import WalletAddress

router = APIRouter(prefix="/api/v1/accounts", tags=["Accounts"])


@router.get("/{wallet}", response_model=AccountResponse)
async def read_account(wallet: WalletAddress, store: AccountStore = Depends(get_account_store)):  # noqa: B008
    account = await get_account(store, wallet)
    return AccountResponse.from_account(account)

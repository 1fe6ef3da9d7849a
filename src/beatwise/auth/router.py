"""Wallet login endpoints under /api/v1/auth."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from redis.asyncio import Redis

from beatwise.accounts.store import AccountStore
from beatwise.auth.schemas import ChallengeRequest, ChallengeResponse, VerifyRequest, VerifyResponse
from beatwise.auth.service import (
    ChallengeNotFound,
    InvalidNonce,
    InvalidSignature,
    SignatureVerifier,
    authenticate,
    issue_challenge,
)
from beatwise.config import get_settings
from beatwise.dependencies import get_account_store, get_redis_dep, get_signature_verifier

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/challenge", response_model=ChallengeResponse)
async def challenge(
    body: ChallengeRequest,
    redis: Redis = Depends(get_redis_dep),  # noqa: B008
) -> ChallengeResponse:
    """Request a message to sign with the wallet."""
    settings = get_settings()
    issued = await issue_challenge(
        redis,
        body.wallet_address,
        brand=settings.auth_message_brand,
        expire_seconds=settings.auth_challenge_expire_seconds,
    )
    return ChallengeResponse(
        nonce=issued.nonce,
        timestamp=issued.timestamp,
        message=issued.message,
        expires_in=issued.expires_in,
    )


@router.post("/verify", response_model=VerifyResponse)
async def verify(
    body: VerifyRequest,
    redis: Redis = Depends(get_redis_dep),  # noqa: B008
    store: AccountStore = Depends(get_account_store),  # noqa: B008
    verify_signature: SignatureVerifier = Depends(get_signature_verifier),  # noqa: B008
) -> VerifyResponse:
    """Verify the signed challenge; creates the account on first login."""
    settings = get_settings()
    try:
        account, created = await authenticate(
            redis,
            store,
            verify_signature,
            body.wallet_address,
            body.nonce,
            body.signature,
            brand=settings.auth_message_brand,
        )
    except ChallengeNotFound:
        raise HTTPException(status_code=400, detail="Challenge expired or not found") from None
    except InvalidNonce:
        raise HTTPException(status_code=400, detail="Invalid nonce") from None
    except InvalidSignature:
        raise HTTPException(status_code=401, detail="Invalid signature") from None

    return VerifyResponse(
        wallet_address=account.wallet_address,
        invite_code=account.invite_code,
        total_points=account.total_points,
        is_new_user=created,
    )

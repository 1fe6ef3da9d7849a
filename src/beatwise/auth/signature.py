"""
Ethereum personal-sign (EIP-191) signature verification.

The wallet signs the challenge text with ``personal_sign``; we recover the
signer address from the signature and compare it, case-insensitively, to the
address that requested the challenge.
"""

from __future__ import annotations

import logging

from eth_account import Account
from eth_account.messages import encode_defunct

logger = logging.getLogger(__name__)


def verify_wallet_signature(address: str, message: str, signature: str) -> bool:
    """
    Check that ``signature`` over ``message`` was produced by ``address``.

    Returns False for malformed signatures instead of raising.
    """
    if not address or not signature:
        return False
    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception:  # noqa: BLE001
        logger.debug("Signature recovery failed for %s", address, exc_info=True)
        return False
    return recovered.lower() == address.lower()

"""Field types shared by the request/response schemas."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator

_WALLET_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_wallet_address(value: str) -> str:
    """Accept ``0x`` + 40 hex chars in any case; return it lowercased."""
    value = value.strip()
    if not _WALLET_RE.match(value):
        raise ValueError("wallet address must be 0x followed by 40 hex characters")
    return value.lower()


WalletAddress = Annotated[str, AfterValidator(validate_wallet_address)]

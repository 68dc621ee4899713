# -*- coding: utf-8 -*-

from __future__ import annotations

import re

_BARE_HEX_ADDRESS = re.compile(r"^[0-9a-f]{40}$")


def normalize_wallet_id(wallet_id: str | None) -> str:
    """
    Normalize an EVM address for comparisons.

    - Lowercasing is enough for equality checks, so EIP-55 checksummed input from the wallet
      compares equal to the recovered address (we don't verify the checksum here).
    - A bare 40-hex address gets the "0x" prefix the recovered address always carries.
    """
    value = (wallet_id or "").strip().lower()
    if _BARE_HEX_ADDRESS.match(value):
        return "0x" + value
    return value

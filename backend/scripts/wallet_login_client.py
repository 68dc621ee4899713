#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import json
import os
import sys
import urllib.error
import urllib.request
from typing import Any, Dict, Optional, Tuple

from eth_account import Account
from eth_account.messages import encode_defunct


def http_json(
    method: str,
    url: str,
    payload: Dict[str, Any] | None = None,
    *,
    timeout: int = 10,
) -> Tuple[int, Any]:
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(url, data=data, headers={"Content-Type": "application/json"}, method=method)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
            return resp.status, json.loads(raw) if raw else None
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8")
        return e.code, raw or e.reason


def _extract_data(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return {}


def sign_server_message(server_message: str, private_key: str) -> str:
    """Same signature MetaMask's personal_sign produces for server_message."""
    signed = Account.sign_message(encode_defunct(text=server_message), private_key=private_key)
    return "0x" + bytes(signed.signature).hex()


def login_with_private_key(api_base: str, private_key: str, *, timeout: int = 10) -> str:
    """
    /api/v1/public/wallet/challenge + /verify.
    Returns the verified address.
    """
    api_base = api_base.rstrip("/")
    pk = private_key.strip()
    if pk.startswith("0x"):
        pk = pk[2:]
    address = Account.from_key(pk).address

    st, ch = http_json("POST", f"{api_base}/api/v1/public/wallet/challenge", {}, timeout=timeout)
    if st >= 400:
        raise RuntimeError(f"wallet challenge failed: {st} {ch}")
    data = _extract_data(ch)
    challenge, state = data.get("challenge"), data.get("state")
    if not challenge or not state:
        raise RuntimeError("wallet challenge response missing challenge/state")

    st2, ver = http_json(
        "POST",
        f"{api_base}/api/v1/public/wallet/verify",
        {"address": address, "signature": sign_server_message(challenge, pk), "state": state},
        timeout=timeout,
    )
    if st2 >= 400:
        raise RuntimeError(f"wallet verify failed: {st2} {ver}")
    verified = _extract_data(ver).get("address")
    if not verified:
        raise RuntimeError("wallet verify response missing address")
    return verified


def resolve_test_private_key(cli_value: Optional[str] = None) -> Optional[str]:
    return (cli_value or os.getenv("WALLET_TEST_PRIVATE_KEY") or "").strip() or None


def main() -> int:
    parser = argparse.ArgumentParser(description="Log in to the wallet login service with an EVM private key.")
    parser.add_argument("--api-base", default="http://127.0.0.1:8000", help="API base URL")
    parser.add_argument("--private-key", default="", help="EVM private key (or env WALLET_TEST_PRIVATE_KEY)")
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout seconds")
    args = parser.parse_args()

    private_key = resolve_test_private_key(args.private_key)
    if not private_key:
        print("missing --private-key / WALLET_TEST_PRIVATE_KEY", file=sys.stderr)
        return 2
    try:
        address = login_with_private_key(args.api_base, private_key, timeout=args.timeout)
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"OK: {address}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Shared fixtures for wallet login tests.

Signatures are produced with eth_account, the same personal_sign encoding
MetaMask uses, so every test checks against an independent implementation.
"""

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

# Well-known test keys: secret exponents 1 and 2
KEY_A = "0x" + "00" * 31 + "01"
KEY_B = "0x" + "00" * 31 + "02"
ADDRESS_A = "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
ADDRESS_B = "0x2b5ad5c4795c026514f8317c7a215e218dccd6cf"


def sign(challenge: str, private_key: str) -> bytes:
    """Return the raw 65-byte r || s || v personal_sign signature."""
    signed = Account.sign_message(encode_defunct(text=challenge), private_key=private_key)
    return bytes(signed.signature)


@pytest.fixture
def challenge():
    return "abcdeFGHIJ"


@pytest.fixture
def signature_a(challenge):
    return sign(challenge, KEY_A)

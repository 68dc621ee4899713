# walletauth/signature_verifier.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import hmac
from typing import Tuple, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import ValidationError, decode_hex, keccak

from common.normalize import normalize_wallet_id
from .errors import AddressMismatch, MalformedSignature, RecoveryFailed
from .models import RecoveredIdentity, SignatureClaim

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"
ADDRESS_PREFIX = "0x"
SIGNATURE_LENGTH = 65


def personal_message_bytes(challenge: str) -> bytes:
    """wallet personal_sign 实际签名的原文：prefix + 十进制字节长度 + 消息。"""
    body = challenge.encode("utf-8")
    return PERSONAL_MESSAGE_PREFIX + str(len(body)).encode("ascii") + body


def personal_message_hash(challenge: str) -> bytes:
    return keccak(personal_message_bytes(challenge))


def parse_signature(signature: Union[str, bytes]) -> bytes:
    """hex（可带 0x）或原始 bytes → 65 字节签名。"""
    if isinstance(signature, str):
        try:
            signature = decode_hex(signature.strip())
        except (ValueError, TypeError) as exc:
            raise MalformedSignature("signature is not valid hex") from exc
    if not isinstance(signature, (bytes, bytearray)):
        raise MalformedSignature("signature must be hex or bytes")
    if len(signature) != SIGNATURE_LENGTH:
        raise MalformedSignature(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
    return bytes(signature)


def split_signature(signature: bytes) -> Tuple[int, int, int]:
    """
    r = [0:32], s = [32:64], v = [64]。
    有的钱包给出 0/1 形式的 recovery id，统一挪到 27/28。
    """
    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    v = signature[64]
    if v < 27:
        v += 27
    if v not in (27, 28):
        raise MalformedSignature(f"unexpected recovery byte v={signature[64]}")
    return v, r, s


def address_from_public_key(public_key: keys.PublicKey) -> str:
    # 64 字节未压缩公钥（不含 0x04 前缀）的 keccak，取低 20 字节
    return ADDRESS_PREFIX + keccak(public_key.to_bytes())[-20:].hex()


def recover_address(challenge: str, signature: Union[str, bytes]) -> str:
    """
    只用 v 指定的 recovery id 恢复；失败就是失败，不会去试另一个 id。
    """
    v, r, s = split_signature(parse_signature(signature))
    try:
        sig = keys.Signature(vrs=(v - 27, r, s))
        public_key = sig.recover_public_key_from_msg_hash(personal_message_hash(challenge))
    except (BadSignature, KeyValidationError, ValidationError) as exc:
        raise RecoveryFailed("signature does not recover a public key") from exc
    return address_from_public_key(public_key)


def verify(original_challenge: str, claim: SignatureClaim) -> RecoveredIdentity:
    """
    纯函数：没有 I/O，也不读 session。

    :raises MalformedSignature: 签名长度/编码/v 不合法，或没有声明地址
    :raises RecoveryFailed: 无法从 (r, s, v) 恢复公钥
    :raises AddressMismatch: 恢复出的地址与声明不一致
    """
    claimed = normalize_wallet_id(claim.claimed_address)
    if not claimed:
        raise MalformedSignature("missing claimed address")

    recovered = recover_address(original_challenge, claim.signature)
    if not hmac.compare_digest(recovered.encode("ascii"), claimed.encode("utf-8")):
        raise AddressMismatch("recovered address does not match claimed address")
    return RecoveredIdentity(address=recovered)

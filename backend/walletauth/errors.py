# walletauth/errors.py
# -*- coding: utf-8 -*-

from __future__ import annotations


class WalletAuthError(Exception):
    """钱包签名登录流程中所有失败的基类，任何一种都意味着本次 attempt 终止。"""


class VerificationError(WalletAuthError):
    pass


class MalformedSignature(VerificationError):
    """签名不是 65 字节 / hex 解码失败 / v 不在 {27, 28}。"""


class RecoveryFailed(VerificationError):
    """(r, s, v) 格式正确，但无法恢复出合法的公钥。"""


class AddressMismatch(VerificationError):
    """恢复成功，但地址与声明的地址不一致。"""


class AttemptStateInvalid(WalletAuthError):
    pass


class ChallengeMissing(WalletAuthError):
    """session 中没有对应的 challenge（过期或已被消费）。"""

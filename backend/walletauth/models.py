# walletauth/models.py
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class AttemptState:
    """
    与一次认证 attempt 关联的状态：
    - attempt_id: 宿主侧的 context identifier
    - login_type: 决定由哪个 authenticator 处理回调，可能缺失
    """
    attempt_id: str
    login_type: Optional[str] = None


@dataclass(frozen=True)
class IssuedChallenge:
    challenge: str
    state: str  # 编码后的 AttemptState


@dataclass(frozen=True)
class SignatureClaim:
    claimed_address: str
    signature: Union[str, bytes]  # 65 字节，或 130 位 hex（可带 0x）


@dataclass(frozen=True)
class RecoveredIdentity:
    address: str  # 0x + 40 位小写 hex

    def to_dict(self):
        return {"address": self.address}

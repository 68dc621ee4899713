# walletauth/attempt_state.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import re
from typing import Optional

from .errors import AttemptStateInvalid
from .models import AttemptState

DELIMITER = ","

# '%' 必须最先转义，否则会把 "%2C" 里的 '%' 再转义一次
_ESCAPES = (("%", "%25"), (",", "%2C"))


def _escape(value: str) -> str:
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


_ESCAPED = re.compile(r"%(25|2[Cc])")


def _unescape(value: str) -> str:
    # 一次扫描完成，解出来的 '%' 不会再被当作转义的开头
    return _ESCAPED.sub(lambda m: "%" if m.group(1) == "25" else DELIMITER, value)


def encode_state(attempt_id: str, login_type: Optional[str]) -> str:
    """
    attempt_id 在第一个分隔符之前，login_type 在之后。
    字段内的 ',' 会被转义，所以按分隔符切分永远不会错位。
    """
    if not attempt_id:
        raise AttemptStateInvalid("attempt_id is required")
    if login_type is None:
        return _escape(attempt_id)
    return f"{_escape(attempt_id)}{DELIMITER}{_escape(login_type)}"


def decode_state(token: Optional[str]) -> Optional[AttemptState]:
    """
    - token 缺失/为空 → None（明确的"没有 state"）
    - 只有 attempt_id → AttemptState(attempt_id, None)
    - 多余的字段忽略
    """
    if not token:
        return None
    parts = token.split(DELIMITER)
    attempt_id = _unescape(parts[0])
    if not attempt_id:
        return None
    login_type = _unescape(parts[1]) if len(parts) > 1 and parts[1] else None
    return AttemptState(attempt_id=attempt_id, login_type=login_type)


def require_state(token: Optional[str]) -> AttemptState:
    state = decode_state(token)
    if state is None:
        raise AttemptStateInvalid("missing or malformed state")
    return state

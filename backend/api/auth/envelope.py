# -*- coding: utf-8 -*-

from __future__ import annotations

import time
from typing import Any, Dict

# 所有认证失败对外都是同一条消息，不暴露失败发生在哪一步
AUTH_FAILED = "Authentication failed"


def now_ms() -> int:
    return int(time.time() * 1000)


def ok(data: Any) -> Dict[str, Any]:
    return {"code": 0, "message": "ok", "data": data, "timestamp": now_ms()}


def fail(code: int, message: str) -> Dict[str, Any]:
    return {"code": int(code), "message": str(message), "data": None, "timestamp": now_ms()}


def auth_failed() -> Dict[str, Any]:
    return fail(401, AUTH_FAILED)

# -*- coding: utf-8 -*-

from __future__ import annotations

import threading
from typing import Dict, Optional

from .envelope import now_ms


class ChallengeStore:
    """
    attempt_id -> challenge 的一次性存储（替代 HTTP session）。

    Notes:
    - pop() 之后记录即被删除，同一个 challenge 只能被校验一次。
    - per-process; for multi-worker production use Redis/DB.
    """

    def __init__(self, ttl_ms: int) -> None:
        self.ttl_ms = int(ttl_ms)
        self._records: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def put(self, attempt_id: str, challenge: str) -> int:
        expires_at = now_ms() + self.ttl_ms
        with self._lock:
            self._purge_expired()
            self._records[attempt_id] = {"challenge": challenge, "expiresAt": expires_at}
        return expires_at

    def pop(self, attempt_id: Optional[str]) -> Optional[str]:
        if not attempt_id:
            return None
        with self._lock:
            record = self._records.pop(attempt_id, None)
        if not record or now_ms() > int(record.get("expiresAt") or 0):
            return None
        return record["challenge"]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _purge_expired(self) -> None:
        now = now_ms()
        expired = [k for k, v in self._records.items() if now > int(v.get("expiresAt") or 0)]
        for key in expired:
            self._records.pop(key, None)

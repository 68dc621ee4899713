# walletauth/challenge_issuer.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import secrets
import string
from typing import Optional

from .attempt_state import encode_state
from .errors import AttemptStateInvalid
from .models import IssuedChallenge

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_letters
DEFAULT_CHALLENGE_LENGTH = 10


class ChallengeIssuer:
    """
    生成给钱包签名的随机 serverMessage。
    它只用来防重放，安全性来自签名本身，不需要保密。
    """

    def __init__(self, *, login_type: Optional[str], length: int = DEFAULT_CHALLENGE_LENGTH) -> None:
        if length <= 0:
            raise ValueError("challenge length must be positive")
        self.login_type = login_type
        self.length = int(length)

    def issue(self) -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(self.length))

    def begin(self, attempt_id: str) -> IssuedChallenge:
        attempt_id = (attempt_id or "").strip()
        if not attempt_id:
            raise AttemptStateInvalid("cannot issue a challenge without an attempt id")
        issued = IssuedChallenge(
            challenge=self.issue(),
            state=encode_state(attempt_id, self.login_type),
        )
        logger.debug("issued wallet challenge for attempt %s", attempt_id)
        return issued

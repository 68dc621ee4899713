# walletauth/authenticator.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Optional, Union
from urllib.parse import urlencode

from .attempt_state import decode_state, require_state
from .challenge_issuer import DEFAULT_CHALLENGE_LENGTH, ChallengeIssuer
from .errors import AttemptStateInvalid, ChallengeMissing, VerificationError
from .models import IssuedChallenge, RecoveredIdentity, SignatureClaim
from .signature_verifier import verify

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_TYPE = "metamask"
SERVER_MESSAGE_PARAM = "serverMessage"
STATE_PARAM = "state"


class WalletAuthenticator:
    """
    宿主框架只需要两个能力：
    - issue_challenge: 请求阶段，返回要存进 session 的 challenge 和 state
    - verify_response: 回调阶段，拿 session 里的 challenge 校验签名
    其余方法（can_handle / context_identifier / login_redirect_url）是宿主生命周期里的胶水。
    """

    name = "MetamaskAuthenticator"
    friendly_name = "metamask"

    def __init__(
        self,
        *,
        login_page_url: str,
        login_type: str = DEFAULT_LOGIN_TYPE,
        challenge_length: int = DEFAULT_CHALLENGE_LENGTH,
    ) -> None:
        self.login_page_url = login_page_url
        self.login_type = login_type
        self.issuer = ChallengeIssuer(login_type=login_type, length=challenge_length)

    # ---------- 宿主生命周期 ----------
    def can_handle(self, state_token: Optional[str]) -> bool:
        state = decode_state(state_token)
        return state is not None and state.login_type == self.login_type

    @staticmethod
    def context_identifier(state_token: Optional[str]) -> Optional[str]:
        state = decode_state(state_token)
        return state.attempt_id if state else None

    def login_redirect_url(self, issued: IssuedChallenge) -> str:
        query = urlencode({SERVER_MESSAGE_PARAM: issued.challenge, STATE_PARAM: issued.state})
        sep = "&" if "?" in self.login_page_url else "?"
        return f"{self.login_page_url}{sep}{query}"

    # ---------- 核心能力 ----------
    def issue_challenge(self, attempt_id: str) -> IssuedChallenge:
        return self.issuer.begin(attempt_id)

    def verify_response(
        self,
        challenge: Optional[str],
        address: Optional[str],
        signature: Union[str, bytes, None],
        state_token: Optional[str],
    ) -> RecoveredIdentity:
        state = require_state(state_token)
        if state.login_type != self.login_type:
            raise AttemptStateInvalid(f"state is not for login type {self.login_type!r}")
        if not challenge:
            raise ChallengeMissing(f"no challenge stored for attempt {state.attempt_id}")

        try:
            identity = verify(challenge, SignatureClaim(claimed_address=address or "", signature=signature or b""))
        except VerificationError as exc:
            logger.info("wallet login failed for attempt %s: %s", state.attempt_id, type(exc).__name__)
            raise
        logger.info("wallet login verified for attempt %s: %s", state.attempt_id, identity.address)
        return identity

# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from api.auth.envelope import auth_failed, ok
from api.deps import get_deps
from api.schemas.wallet_auth import WalletChallengeRequest, WalletVerifyRequest
from walletauth.errors import WalletAuthError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/public/wallet", tags=["wallet-auth"])


def _begin_attempt(deps, attempt_id: Optional[str]):
    attempt_id = (attempt_id or "").strip() or secrets.token_hex(16)
    issued = deps.authenticator.issue_challenge(attempt_id)
    expires_at = deps.challenge_store.put(attempt_id, issued.challenge)
    return attempt_id, issued, expires_at


@router.get("/login")
def wallet_login(attempt_id: Optional[str] = None, deps=Depends(get_deps)):
    _, issued, _ = _begin_attempt(deps, attempt_id)
    return RedirectResponse(deps.authenticator.login_redirect_url(issued), status_code=307)


@router.post("/challenge")
def wallet_challenge(req: WalletChallengeRequest, deps=Depends(get_deps)):
    attempt_id, issued, expires_at = _begin_attempt(deps, req.attempt_id)
    return ok(
        {
            "attemptId": attempt_id,
            "challenge": issued.challenge,
            "state": issued.state,
            "redirectUrl": deps.authenticator.login_redirect_url(issued),
            "expiresAt": expires_at,
        }
    )


@router.post("/verify")
def wallet_verify(req: WalletVerifyRequest, deps=Depends(get_deps)):
    authenticator = deps.authenticator
    if not authenticator.can_handle(req.state):
        logger.info("wallet verify rejected (state not for %s)", authenticator.login_type)
        raise HTTPException(status_code=401, detail=auth_failed())

    attempt_id = authenticator.context_identifier(req.state)
    # 先取出再校验：无论成功与否，challenge 都不能被重用
    challenge = deps.challenge_store.pop(attempt_id)
    try:
        identity = authenticator.verify_response(challenge, req.address, req.signature, req.state)
    except WalletAuthError as exc:
        logger.info("wallet verify rejected (%s)", type(exc).__name__)
        raise HTTPException(status_code=401, detail=auth_failed())

    return ok({"attemptId": attempt_id, **identity.to_dict()})

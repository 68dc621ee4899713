# api/deps.py
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from api.auth.challenge_store import ChallengeStore
from settings.config import Settings
from walletauth.authenticator import WalletAuthenticator


# -------------------------------------------------
# Settings
# -------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# -------------------------------------------------
# Wallet login
# -------------------------------------------------
@lru_cache(maxsize=1)
def get_authenticator() -> WalletAuthenticator:
    settings = get_settings()
    return WalletAuthenticator(
        login_page_url=settings.wallet_login_page_url,
        login_type=settings.wallet_login_type,
        challenge_length=settings.wallet_challenge_length,
    )


@lru_cache(maxsize=1)
def get_challenge_store() -> ChallengeStore:
    return ChallengeStore(ttl_ms=get_settings().wallet_challenge_ttl_ms)


@dataclass
class Deps:
    settings: Settings
    authenticator: WalletAuthenticator
    challenge_store: ChallengeStore


# -------------------------------------------------
# Deps (API 层统一依赖)
# -------------------------------------------------
@lru_cache(maxsize=1)
def get_deps() -> Deps:
    return Deps(
        settings=get_settings(),
        authenticator=get_authenticator(),
        challenge_store=get_challenge_store(),
    )

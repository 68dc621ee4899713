# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class WalletChallengeRequest(BaseModel):
    attempt_id: Optional[str] = Field(None, description="Host authentication context id; generated when omitted")


class WalletVerifyRequest(BaseModel):
    address: str = Field(..., description="EVM address (0x...)")
    signature: str = Field(..., description="personal_sign signature, 130 hex chars, optional 0x")
    state: Optional[str] = Field(None, description="State token echoed back from the signing page")

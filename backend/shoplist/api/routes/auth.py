"""Auth Routes — magic-link login, code verification and token introspection.

Invariants:
    - /login always answers with the same message; the code only travels by email
    - /verify returns a token only after the code and any invitation were consumed
"""

import logging

from fastapi import APIRouter, Depends

from shoplist.api.dependencies import get_current_claims, get_sign_in_flow
from shoplist.core.entities import TokenClaims
from shoplist.schemas.auth import (
    ClaimsResponse, LoginRequest, LoginResponse, UserResponse,
    VerifyRequest, VerifyResponse,
)
from shoplist.services.sign_in import SignInFlow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, flow: SignInFlow = Depends(get_sign_in_flow)):
    """Email a one-time login code."""
    await flow.request_login(body.email)
    return LoginResponse(message="Login code sent to your email")


@router.post("/verify", response_model=VerifyResponse)
async def verify(body: VerifyRequest, flow: SignInFlow = Depends(get_sign_in_flow)):
    """Exchange email + code for a session token."""
    token, user = await flow.complete_login(body.email, body.code)
    return VerifyResponse(token=token, user=UserResponse.from_entity(user))


@router.get("/me", response_model=ClaimsResponse)
async def me(claims: TokenClaims = Depends(get_current_claims)):
    return ClaimsResponse.from_claims(claims)

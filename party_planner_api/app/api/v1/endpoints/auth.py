"""
Authentication endpoints for API v1.

Two ways to obtain a session token: username and password of a
verified account, or a Google ID token obtained by the frontend.  Both
return the same body; send the token back as ``Authorization: Bearer``.
"""

from fastapi import APIRouter, Depends

from party_planner_api.app.core.db import Database, get_db
from party_planner_api.app.schemas.auth import AuthResponse, GoogleLoginRequest, LoginRequest
from party_planner_api.app.services.auth_service import AuthService
from party_planner_api.app.services.identity import GoogleIdentityVerifier, get_identity_verifier

router = APIRouter()


@router.post("/login", response_model=AuthResponse)
async def login(credentials: LoginRequest, db: Database = Depends(get_db)) -> AuthResponse:
    """Log in with username and password.

    Unknown users, wrong passwords and unverified accounts all answer
    401 with the same message.
    """
    return await AuthService.authenticate(db, credentials.username, credentials.password)


@router.post("/google", response_model=AuthResponse)
async def login_with_google(
    payload: GoogleLoginRequest,
    db: Database = Depends(get_db),
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
) -> AuthResponse:
    """Log in with a Google ID token; the account is created on first use."""
    return await AuthService.authenticate_with_external_identity(db, verifier, payload.google_token)

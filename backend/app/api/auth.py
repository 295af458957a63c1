"""
auth.py — Registration, Login and Session Endpoints (API Layer)

Purpose:
- POST /auth/register → create an account, return the public user view.
- POST /auth/login    → check credentials, issue a 1h access token.
- GET  /auth/me       → return the caller's public user view.

This file should be thin. Hashing and tokens live in core/security.py;
uniqueness and credential checks live in services/accounts.py.
bcrypt work is pushed to the thread pool so it never blocks the event loop.
"""

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool

from app.api.deps import current_claims, get_accounts, get_tokens, validated_body
from app.core.security import ACCESS_TOKEN_TTL_LABEL, SessionClaims, TokenService
from app.models.base import Record
from app.models.user import UserPublic
from app.services.accounts import AccountDirectory
from app.validation.shapes import LoginRequest, RegisterRequest

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

# -----------------------------------------------------------------------------
# Response Schemas
# -----------------------------------------------------------------------------

class LoginResponse(Record):
    """
    - `token`: encoded JWT, sent back as `Authorization: Bearer <token>`.
    - `expires_in`: human-readable lifetime ("1h").
    """
    message: str = "Login successful"
    token: str
    expires_in: str = ACCESS_TOKEN_TTL_LABEL


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest = Depends(validated_body(RegisterRequest)),
    accounts: AccountDirectory = Depends(get_accounts),
):
    """
    POST /auth/register

    409 EMAIL_EXISTS when the email is taken in any letter case.
    """
    return await run_in_threadpool(
        accounts.register,
        payload.name,
        payload.email,
        payload.password,
        payload.role,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest = Depends(validated_body(LoginRequest)),
    accounts: AccountDirectory = Depends(get_accounts),
    tokens: TokenService = Depends(get_tokens),
):
    """
    POST /auth/login

    Unknown email and wrong password both give 400 INVALID_CREDENTIALS.
    """
    user = await run_in_threadpool(accounts.authenticate_credentials, payload.email, payload.password)
    token = tokens.issue(user.id, user.email, user.role)
    return LoginResponse(token=token)


@router.get("/me", response_model=UserPublic)
async def me(
    claims: SessionClaims = Depends(current_claims),
    accounts: AccountDirectory = Depends(get_accounts),
):
    """
    GET /auth/me

    404 NOT_FOUND if the token is valid but its user no longer exists
    (for example a token from before a restart).
    """
    return accounts.find_by_id(claims.subject_id).public()

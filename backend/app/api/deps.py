"""
deps.py — Request Pipeline Stages (FastAPI Dependencies)

Every route is an ordered pipeline of named stages:

    validate → authenticate → authorize → handle

Each stage is a FastAPI dependency. FastAPI resolves a route's dependencies in
parameter order, so routes list `validated_body(...)` first and the auth gate
second; the first stage that raises an ApiError short-circuits the rest and the
handler never runs.

The pure checks (`authenticate_header`, `authorize`) take no Request and are
unit-tested without HTTP.
"""

from typing import Callable, Optional, Type

from fastapi import Depends, Header, Request

from app.core.errors import AuthInvalid, AuthMissing, Forbidden, ValidationFailed
from app.core.security import SessionClaims, TokenService
from app.services.accounts import AccountDirectory
from app.services.catalog import CatalogStore
from app.services.orders import OrderEngine
from app.validation import validate
from app.validation.shapes import RequestShape

BEARER_PREFIX = "Bearer"


# -----------------------------------------------------------------------------
# Store / Service Accessors (lifespan-owned objects on app.state)
# -----------------------------------------------------------------------------

def get_accounts(request: Request) -> AccountDirectory:
    return request.app.state.accounts


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog


def get_orders(request: Request) -> OrderEngine:
    return request.app.state.orders


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


# -----------------------------------------------------------------------------
# Stage 1: validate
# -----------------------------------------------------------------------------

def validated_body(schema: Type[RequestShape]) -> Callable:
    """
    Build a dependency that decodes the JSON body and validates it against
    `schema`. Raises ValidationFailed with field-level details on failure.
    """
    async def _validate(request: Request) -> RequestShape:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationFailed(details=[{"path": "", "message": "Malformed JSON body"}]) from None

        result = validate(schema, payload)
        if not result.ok:
            raise ValidationFailed(details=[issue.to_dict() for issue in result.issues])
        return result.value

    _validate.__name__ = f"validate_{schema.__name__}"
    return _validate


# -----------------------------------------------------------------------------
# Stage 2: authenticate
# -----------------------------------------------------------------------------

def authenticate_header(authorization: Optional[str], tokens: TokenService) -> SessionClaims:
    """
    Turn an Authorization header value into verified claims.

    Raises:
        AuthMissing: header absent or not exactly `Bearer <token>`
        AuthInvalid: token failed verification (any reason)
    """
    parts = (authorization or "").split(" ")
    if len(parts) != 2 or parts[0] != BEARER_PREFIX or not parts[1]:
        raise AuthMissing()

    claims = tokens.verify(parts[1])
    if claims is None:
        raise AuthInvalid()
    return claims


async def current_claims(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_tokens),
) -> SessionClaims:
    return authenticate_header(authorization, tokens)


# -----------------------------------------------------------------------------
# Stage 3: authorize
# -----------------------------------------------------------------------------

def authorize(claims: SessionClaims, required_role: str) -> None:
    """
    Exact role match; there is no role hierarchy.

    Raises:
        Forbidden: claims carry a different role
    """
    if claims.role != required_role:
        raise Forbidden()


def require_role(required_role: str) -> Callable:
    async def _require_role(claims: SessionClaims = Depends(current_claims)) -> SessionClaims:
        authorize(claims, required_role)
        return claims

    _require_role.__name__ = f"require_{required_role}"
    return _require_role

"""
Tests for the access control stages in api/deps.py, without HTTP.
"""

import datetime

import pytest

from app.api.deps import authenticate_header, authorize
from app.core.errors import AuthInvalid, AuthMissing, Forbidden


def test_valid_bearer_header_yields_claims(tokens):
    token = tokens.issue("user-1", "a@example.com", "user")
    claims = authenticate_header(f"Bearer {token}", tokens)
    assert claims.subject_id == "user-1"
    assert claims.role == "user"


@pytest.mark.parametrize(
    "header",
    [None, "", "Bearer", "Bearer ", "bearer abc", "Token abc", "Basic dXNlcjpwYXNz", "Bearer  abc", "Bearer a b"],
)
def test_missing_or_malformed_header_is_auth_missing(tokens, header):
    with pytest.raises(AuthMissing):
        authenticate_header(header, tokens)


def test_bad_token_is_auth_invalid(tokens):
    with pytest.raises(AuthInvalid):
        authenticate_header("Bearer not-a-jwt", tokens)


def test_expired_token_is_auth_invalid(tokens):
    issued = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(hours=2)
    token = tokens.issue("user-1", "a@example.com", "user", now=issued)
    with pytest.raises(AuthInvalid) as exc_info:
        authenticate_header(f"Bearer {token}", tokens)
    assert exc_info.value.code == "AUTH_INVALID"
    assert exc_info.value.status_code == 401


def test_authorize_exact_role_match(tokens):
    admin = tokens.verify(tokens.issue("a", "a@example.com", "admin"))
    user = tokens.verify(tokens.issue("u", "u@example.com", "user"))

    authorize(admin, "admin")
    authorize(user, "user")

    with pytest.raises(Forbidden):
        authorize(user, "admin")
    # no hierarchy: admin does not satisfy a user-only requirement
    with pytest.raises(Forbidden):
        authorize(admin, "user")

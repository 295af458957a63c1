"""
Tests for core/security.py: credential hashing and access tokens.
"""

import datetime

from jose import jwt

from app.core.security import ACCESS_TOKEN_TTL, SessionClaims, TokenService


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


# ============================================================================
# Credential Hasher
# ============================================================================

def test_hash_is_not_plaintext_and_verifies(hasher):
    digest = hasher.hash("hunter22")
    assert digest != "hunter22"
    assert digest.startswith("$2")
    assert hasher.verify("hunter22", digest)


def test_verify_rejects_wrong_password(hasher):
    digest = hasher.hash("hunter22")
    assert not hasher.verify("hunter23", digest)


def test_hash_is_salted(hasher):
    assert hasher.hash("same-password") != hasher.hash("same-password")


def test_verify_returns_false_for_malformed_digest(hasher):
    assert hasher.verify("anything", "not-a-bcrypt-digest") is False
    assert hasher.verify("anything", "") is False


def test_dummy_verify_never_matches(hasher):
    assert hasher.dummy_verify() is False


# ============================================================================
# Token Service
# ============================================================================

def test_issued_token_verifies_immediately(tokens):
    token = tokens.issue("user-1", "a@example.com", "admin")
    claims = tokens.verify(token)

    assert isinstance(claims, SessionClaims)
    assert claims.subject_id == "user-1"
    assert claims.email == "a@example.com"
    assert claims.role == "admin"


def test_token_expires_exactly_one_hour_after_issue(tokens):
    claims = tokens.verify(tokens.issue("user-1", "a@example.com", "user"))
    assert claims.expires_at - claims.issued_at == ACCESS_TOKEN_TTL
    assert ACCESS_TOKEN_TTL == datetime.timedelta(hours=1)


def test_expired_token_is_invalid(tokens):
    token = tokens.issue("user-1", "a@example.com", "user", now=_now() - datetime.timedelta(hours=1, seconds=5))
    assert tokens.verify(token) is None


def test_token_near_expiry_is_still_valid(tokens):
    token = tokens.issue("user-1", "a@example.com", "user", now=_now() - datetime.timedelta(minutes=59))
    assert tokens.verify(token) is not None


def test_token_signed_with_other_secret_is_invalid(tokens):
    forged = TokenService("some-other-secret").issue("user-1", "a@example.com", "admin")
    assert tokens.verify(forged) is None


def test_tampered_payload_is_invalid(tokens):
    header, _, signature = tokens.issue("user-1", "a@example.com", "user").split(".")
    other_payload = TokenService("x").issue("user-1", "a@example.com", "admin").split(".")[1]
    assert tokens.verify(f"{header}.{other_payload}.{signature}") is None


def test_garbage_tokens_are_invalid(tokens):
    for token in ["", "abc", "a.b.c", "....", "Bearer x"]:
        assert tokens.verify(token) is None


def test_token_missing_claims_is_invalid(tokens):
    now = int(_now().timestamp())
    token = jwt.encode({"sub": "user-1", "iat": now, "exp": now + 60}, "test-secret-not-for-production", algorithm="HS256")
    assert tokens.verify(token) is None


def test_token_without_expiry_is_invalid(tokens):
    token = jwt.encode(
        {"sub": "user-1", "email": "a@example.com", "role": "user", "iat": int(_now().timestamp())},
        "test-secret-not-for-production",
        algorithm="HS256",
    )
    assert tokens.verify(token) is None

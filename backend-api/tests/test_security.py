"""
토큰 서비스 / 패스워드 해싱 테스트
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    UnauthorizedError,
    WrongTokenTypeError,
)
from app.core.security import TokenKind, TokenService, get_password_hash, verify_password
from app.models.user import Role


@pytest.fixture
def tokens():
    return TokenService("test-secret", timedelta(minutes=15), timedelta(days=7))


class TestTokenService:

    def test_issue_and_verify_access(self, tokens):
        token = tokens.issue(TokenKind.ACCESS, "user-1", "a@example.com", Role.ADMIN)
        claims = tokens.verify_access(token)
        assert claims.sub == "user-1"
        assert claims.email == "a@example.com"
        assert claims.role == Role.ADMIN
        assert claims.token_type == TokenKind.ACCESS
        assert claims.exp - claims.iat == 15 * 60

    def test_refresh_ttl(self, tokens):
        token = tokens.issue(TokenKind.REFRESH, "user-1", "a@example.com", Role.USER)
        claims = tokens.verify_refresh(token)
        assert claims.exp - claims.iat == 7 * 24 * 60 * 60

    def test_kinds_are_not_interchangeable(self, tokens):
        pair = tokens.issue_pair("user-1", "a@example.com", Role.USER)
        with pytest.raises(WrongTokenTypeError):
            tokens.verify_refresh(pair.access_token)
        with pytest.raises(WrongTokenTypeError):
            tokens.verify_access(pair.refresh_token)

    def test_expired_tokens_fail(self, tokens):
        past = datetime.now(timezone.utc) - timedelta(days=30)
        access = tokens.issue(TokenKind.ACCESS, "user-1", "a@example.com", Role.USER, now=past)
        refresh = tokens.issue(TokenKind.REFRESH, "user-1", "a@example.com", Role.USER, now=past)
        for token in (access, refresh):
            with pytest.raises(TokenExpiredError):
                tokens.verify(token)

    def test_wrong_secret_is_invalid_signature(self, tokens):
        other = TokenService("other-secret", timedelta(minutes=15), timedelta(days=7))
        token = other.issue(TokenKind.ACCESS, "user-1", "a@example.com", Role.USER)
        with pytest.raises(InvalidSignatureError):
            tokens.verify(token)

    def test_garbage_is_malformed(self, tokens):
        with pytest.raises(MalformedTokenError):
            tokens.verify("not-a-jwt")

    def test_missing_claims_is_malformed(self, tokens):
        token = jwt.encode(
            {"sub": "user-1", "exp": int(datetime.now(timezone.utc).timestamp()) + 60},
            "test-secret",
            algorithm="HS256",
        )
        with pytest.raises(MalformedTokenError):
            tokens.verify(token)

    def test_token_errors_are_unauthorized(self):
        for error in (MalformedTokenError, InvalidSignatureError, TokenExpiredError, WrongTokenTypeError):
            assert issubclass(error, UnauthorizedError)
            assert error().status_code == 401


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = get_password_hash("password123")
        assert hashed != "password123"
        assert verify_password("password123", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_unknown_hash_format(self):
        assert not verify_password("password123", "plain-text-not-a-hash")

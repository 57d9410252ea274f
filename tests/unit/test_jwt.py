import time

import pytest
from authlib.jose import jwt
from fastapi import HTTPException

from src.bookstore.core.services.jwt import JwtGeneratorService, JwtVerificationService
from src.bookstore.runtime.config.config_data import ConfigData, JWTConfig
from src.bookstore.runtime.context import get_config, with_context
from tests.utils import signed_token


class TestAccessTokens:
    def test_round_trip_carries_role(self):
        token = JwtGeneratorService().generate_access_token("customer-1", "customer")
        claims = JwtVerificationService().verify_jwt(token)

        assert claims.sub == "customer-1"
        assert claims.role == "customer"
        assert claims.iss == get_config().jwt.issuer
        assert claims.exp - claims.iat == get_config().jwt.expires_in_seconds

    def test_configured_lifetime(self):
        with with_context(ConfigData(jwt=JWTConfig(expires_in_seconds=60))):
            token = JwtGeneratorService().generate_access_token("admin-1", "admin")
            claims = JwtVerificationService().verify_jwt(token)
        assert claims.exp - claims.iat == 60

    def test_reserved_claims_cannot_be_overridden(self):
        token = JwtGeneratorService().generate_jwt(
            "customer-1", claims={"sub": "someone-else", "role": "customer"}
        )
        assert JwtVerificationService().verify_jwt(token).sub == "customer-1"


class TestVerification:
    def test_wrong_secret_rejected(self):
        token = signed_token("customer-1", "customer", secret="not-the-secret")
        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt(token)
        assert exc_info.value.status_code == 401

    def test_wrong_issuer_rejected(self):
        token = signed_token("customer-1", "customer", issuer="https://elsewhere.test")
        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt(token)
        assert exc_info.value.status_code == 401

    def test_expired_token_rejected(self):
        token = signed_token("customer-1", "customer", expires_in=-3600)
        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt(token)
        assert exc_info.value.status_code == 401

    def test_unknown_role_rejected(self):
        token = signed_token("customer-1", "superuser")
        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt(token)
        assert exc_info.value.detail == "Token has no valid role"

    def test_other_algorithms_rejected(self):
        config = get_config().jwt
        now = int(time.time())
        payload = {
            "iss": config.issuer,
            "sub": "c",
            "role": "customer",
            "iat": now,
            "exp": now + 60,
        }
        token = jwt.encode({"alg": "HS512"}, payload, config.secret)
        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt(token.decode())
        assert exc_info.value.status_code == 401

    def test_garbage_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            JwtVerificationService().verify_jwt("not.a.token")
        assert exc_info.value.status_code == 401

"""JWT verification service."""

from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger
from pydantic import BaseModel

from src.bookstore.runtime.context import get_config


class TokenClaims(BaseModel):
    """Validated claims of an access token."""

    sub: str
    role: str
    iss: str
    iat: int
    exp: int


class JwtVerificationService:
    def verify_jwt(self, token: str, *, key: str | None = None) -> TokenClaims:
        """Check signature, issuer and lifetime; raise 401 on any failure."""
        cfg = get_config()
        verification_key = key or cfg.jwt.secret
        if not verification_key:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "value": cfg.jwt.issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            # only the configured algorithm is accepted
            claims = JsonWebToken([cfg.jwt.algorithm]).decode(
                token, verification_key, claims_options=claims_options
            )
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected token: {}", exc)
            raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

        if claims.get("role") not in ("admin", "customer"):
            raise HTTPException(status_code=401, detail="Token has no valid role")
        return TokenClaims(
            sub=claims["sub"],
            role=claims["role"],
            iss=claims["iss"],
            iat=int(claims.get("iat", 0)),
            exp=int(claims["exp"]),
        )

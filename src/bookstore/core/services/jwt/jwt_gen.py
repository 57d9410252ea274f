import time

from authlib.jose import JoseError, jwt
from fastapi import HTTPException

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config


class JwtGeneratorService:
    """Service for generating access tokens for admins and customers."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict | None = None,
        expires_in_seconds: int | None = None,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim, the principal id
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime (defaults to the configured lifetime)
            secret: Signing secret (defaults to the configured secret)

        Returns:
            Signed JWT token string

        Raises:
            HTTPException: If the secret is missing or encoding fails
        """
        config: ConfigData = get_config()
        secret = secret or config.jwt.secret
        if not secret:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        now = int(time.time())
        lifetime = expires_in_seconds
        if lifetime is None:
            lifetime = config.jwt.expires_in_seconds
        payload = {
            "iss": config.jwt.issuer,
            "sub": subject,
            "iat": now,
            "exp": now + lifetime,
        }
        if claims:
            payload.update(
                {k: v for k, v in claims.items() if k not in {"iss", "sub", "exp", "iat"}}
            )

        try:
            header = {"alg": config.jwt.algorithm, "typ": "JWT"}
            token = jwt.encode(header, payload, secret)
            return token.decode() if isinstance(token, bytes) else token
        except JoseError as e:
            raise HTTPException(status_code=500, detail=f"JWT encoding failed: {e}") from e

    def generate_access_token(self, principal_id: str, role: str, **extra_claims) -> str:
        """Access token carrying the principal's role (``admin`` or ``customer``)."""
        return self.generate_jwt(subject=principal_id, claims={"role": role, **extra_claims})

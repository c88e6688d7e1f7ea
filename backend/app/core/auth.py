from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.config.settings import settings


class TokenClaims(dict):
    """Claims we rely on from a validated identity provider token."""

    @property
    def account_id(self) -> str:
        return self["sub"]

    @property
    def email(self) -> Optional[str]:
        return self.get("email")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token the same way the identity provider does.
    Used by the dev scripts and the test suite.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=60)
    to_encode.update({"exp": expire})
    if settings.jwt_audience and "aud" not in to_encode:
        to_encode["aud"] = settings.jwt_audience
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> TokenClaims:
    options = {} if settings.jwt_audience else {"verify_aud": False}
    payload = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.algorithm],
        audience=settings.jwt_audience,
        options=options,
    )
    if not payload.get("sub"):
        raise JWTError("Token has no subject")
    return TokenClaims(payload)

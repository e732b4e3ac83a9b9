"""
JWT session tokens and password hashing (bcrypt).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from jose import JWTError, jwt
from passlib.context import CryptContext

from employee_api.core.config import Settings
from employee_api.core.exceptions import AuthError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_BEARER_SCHEME = "bearer"


class TokenSubject(Protocol):
    id: int
    username: str
    email: str


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
class TokenService:
    """Issues and verifies signed session tokens.

    Built once from ``Settings`` at app creation and handed to resolvers
    through the GraphQL context.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self.expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            secret=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expires_delta=timedelta(days=settings.JWT_EXPIRE_DAYS),
        )

    def generate_token(
        self,
        user: TokenSubject,
        expires_delta: timedelta | None = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)
        return jwt.encode(
            {
                "sub": str(user.id),
                "username": user.username,
                "email": user.email,
                "iat": now,
                "exp": expire,
            },
            self._secret,
            algorithm=self._algorithm,
        )

    def verify_token(self, token: str) -> dict[str, Any]:
        """Return the embedded claims; raise ``AuthError`` if invalid or expired."""
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise AuthError("Invalid or expired token") from exc


def extract_bearer_token(header: str | None) -> str | None:
    """Accept both ``Bearer <token>`` and a bare token."""
    if header is None:
        return None
    parts = header.split(None, 1)
    if parts and parts[0].lower() == _BEARER_SCHEME:
        return parts[1].strip() if len(parts) == 2 else None
    return header.strip() or None

"""Password hashing and JWT issuance/verification for authentication."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from calcsaas.core.config import Settings
from calcsaas.core.errors import InvalidToken

PASSWORD_MIN_LEN = 6
# bcrypt only looks at the first 72 bytes.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str, rounds: int) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@dataclass(frozen=True)
class Identity:
    """User identity resolved from a verified token."""

    user_id: int
    username: str


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Issues and verifies signed, expiring identity tokens.

    Stateless: verification depends only on the token, the signing secret
    and the current time. There is no revocation list.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expires_delta = expires_delta
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expires_delta=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        )

    def issue(self, user_id: int, username: str) -> str:
        """Create a token carrying userId and username, expiring expires_delta after issuance."""
        now = self._clock()
        payload: dict[str, Any] = {
            "userId": user_id,
            "username": username,
            "iat": now,
            "exp": now + self._expires_delta,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        """
        Decode and validate a token; return the identity it asserts.
        Raises InvalidToken on bad signature, malformed payload or expiry.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidToken(cause=e) from e

        user_id = payload.get("userId")
        username = payload.get("username")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidToken()
        if not isinstance(username, str) or not username:
            raise InvalidToken()
        return Identity(user_id=user_id, username=username)

"""Token service for issuing and verifying signed, time-bound JWT bearer tokens."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt


class ConfigurationError(Exception):
    """Raised when required startup configuration is missing."""
    pass


class TokenError(Exception):
    """Base exception for token verification failures."""
    kind = "invalid"


class MalformedTokenError(TokenError):
    """Raised when the token is not a decodable JWT or lacks a subject."""
    kind = "malformed"


class InvalidSignatureError(TokenError):
    """Raised when the signature does not match the signing secret."""
    kind = "invalid_signature"


class TokenExpiredError(TokenError):
    """Raised when the token expiry is at or before the current time."""
    kind = "expired"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies stateless access tokens carrying a user id."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60,
        clock: Callable[[], datetime] = _utc_now
    ):
        if not secret:
            raise ConfigurationError(
                "JWT_SECRET is not configured. Please set it in your environment variables."
            )
        self._secret = secret
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expires_minutes)
        self._clock = clock

    @classmethod
    def from_settings(cls, settings) -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    def issue(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token for the given user id."""
        now = self._clock()
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)
        to_encode = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp())
        }
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Decode and validate a JWT token.

        Args:
            token: The encoded bearer token

        Returns:
            The user id from the token subject

        Raises:
            MalformedTokenError: token cannot be parsed or has no subject
            InvalidSignatureError: signature or algorithm does not match
            TokenExpiredError: expiry is at or before now
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise MalformedTokenError(str(e))

        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False}
            )
        except JWTError as e:
            raise InvalidSignatureError(str(e))

        user_id = payload.get("sub")
        exp = payload.get("exp")
        if not user_id or not isinstance(exp, (int, float)):
            raise MalformedTokenError("Token is missing required claims")

        if exp <= self._clock().timestamp():
            raise TokenExpiredError("Token has expired")

        return user_id

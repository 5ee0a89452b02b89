"""
Token service for issuing and verifying signed, time-bounded access tokens.
Tokens are stateless JWTs; rotating the signing secret invalidates every outstanding token.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from househunt.config import get_settings
from househunt.utils.exceptions import InvalidTokenError
import uuid
import logging

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


class TokenService:
    """
    Issues and verifies access tokens for a single signing configuration.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24 * 7):
        if not secret_key:
            raise ValueError("Token signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @property
    def expires_in(self) -> int:
        """Default token lifetime in seconds."""
        return self.expire_minutes * 60

    def issue(self, user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token for a user.

        Args:
            user_id: User's UUID
            expires_delta: Optional custom lifetime, defaults to the configured TTL

        Returns:
            Encoded JWT token string
        """
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + (expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes))

        to_encode = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
            "type": ACCESS_TOKEN_TYPE,
        }

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> uuid.UUID:
        """
        Verify a token and return the user id it was issued for.

        Args:
            token: JWT token string

        Returns:
            UUID of the token subject

        Raises:
            InvalidTokenError: If the signature does not match, the token has
                expired, or the payload is malformed
        """
        if not token:
            raise InvalidTokenError()

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.debug("Rejected expired token")
            raise InvalidTokenError()
        except JWTError as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidTokenError()

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            logger.debug("Rejected token with unexpected type")
            raise InvalidTokenError()

        # jose only validates exp when present
        if "exp" not in payload:
            raise InvalidTokenError()

        try:
            return uuid.UUID(str(payload.get("sub")))
        except ValueError:
            logger.debug("Rejected token with malformed subject")
            raise InvalidTokenError()


@lru_cache()
def get_token_service() -> TokenService:
    """Build the process-wide token service from settings."""
    settings = get_settings()
    return TokenService(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )

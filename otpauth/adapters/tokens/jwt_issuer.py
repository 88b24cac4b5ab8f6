"""
JWT token issuer adapter - Implements TokenIssuer protocol.

Session tokens are stateless HS256 JWTs: validity is decided entirely by
signature and the exp claim, nothing is stored server-side.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt


class InvalidToken(Exception):
    """Token is malformed, wrongly signed, or expired."""


class JwtTokenIssuer:
    """Signs and verifies session tokens with PyJWT."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        claims = {"sub": str(user_id), "iat": now, "exp": now + self._ttl}
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode a token and check its signature and expiry.

        Raises:
            InvalidToken: If the token is expired or otherwise invalid
        """
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as e:
            raise InvalidToken("Token expired") from e
        except jwt.PyJWTError as e:
            raise InvalidToken("Invalid token") from e

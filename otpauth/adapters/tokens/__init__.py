"""Session token adapters."""

from .jwt_issuer import InvalidToken, JwtTokenIssuer

__all__ = ["InvalidToken", "JwtTokenIssuer"]

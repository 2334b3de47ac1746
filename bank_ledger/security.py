"""
Security utilities: bearer token verification.

Tokens are issued by the external identity service after login. The ledger
never sees passwords and never issues tokens; it only checks that a token
was signed with the shared SECRET_KEY (HS256 by default) and has not
expired, then reads the caller's identity from the `sub` claim.

Enterprise note:
  With an asymmetric algorithm (RS256) the ledger would hold only the
  identity service's public key. Switching is a matter of ALGORITHM and the
  key passed to jwt.decode().
"""

from jose import jwt

from bank_ledger.config import settings


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Verifies the signature and expiration. Raises JWTError if the token
    is invalid, expired, or tampered with.

    Args:
        token: The encoded JWT string from the Authorization header.

    Returns:
        The decoded payload dictionary (contains "sub", "exp", etc.).

    Raises:
        jose.JWTError: If the token is invalid or expired.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])

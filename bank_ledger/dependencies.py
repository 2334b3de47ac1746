"""
FastAPI dependencies for caller identity.

The identity provider is external: it authenticates users and issues JWTs.
This module turns the bearer token on a request into an explicit owner ID
that routers pass into every ledger call:

  get_current_owner_id (Bearer JWT -> owner_id str)

Every account endpoint declares it as a parameter. If the token is missing,
expired or tampered with, the request is rejected with 401 before the
route handler runs.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from bank_ledger.security import decode_access_token


# Where to look for the token: the "Authorization: Bearer <token>" header.
# The tokenUrl belongs to the identity service (used by Swagger UI's
# "Authorize" button).
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


async def get_current_owner_id(
    token: str = Depends(oauth2_scheme),
) -> str:
    """
    Validate the JWT and return the caller's owner ID (the `sub` claim).

    Raises:
        HTTPException 401: If the token is invalid or carries no subject.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    owner_id = payload.get("sub")
    if not owner_id:
        raise credentials_exception

    return str(owner_id)

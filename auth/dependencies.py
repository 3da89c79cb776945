"""
auth/dependencies.py -- FastAPI Depends() helper for bearer authentication.

The only credential accepted is an "Authorization: Bearer <token>" header
carrying a JWT from auth/tokens.create_access_token(). The guard is
stateless: it verifies signature and expiry and returns the user id from
the token without looking the user up.

Two distinct 401 messages are returned, matching what clients already
display:
  "Unauthorized"  -- header missing or not a Bearer credential
  "Invalid token" -- Bearer credential present but bad signature/expired

Layer rule: no imports from api/, catalog/, or client/.
  auth/dependencies.py may import from fastapi (for Request/HTTPException)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.tokens import decode_access_token, extract_bearer_token

_WWW_AUTHENTICATE = {"WWW-Authenticate": "Bearer"}


def authenticate(authorization: str | None) -> str:
    """Resolve a raw Authorization header value to a user id.

    Raises HTTP 401 on a missing/malformed header or an invalid token.
    Separated from the FastAPI signature so it can be unit tested directly.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Unauthorized"},
            headers=_WWW_AUTHENTICATE,
        )
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "invalid_token", "message": "Invalid token"},
            headers=_WWW_AUTHENTICATE,
        )
    return user_id


def get_current_user_id(request: Request) -> str:
    """Require a valid bearer token. Returns the caller's user id.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user_id: str = Depends(get_current_user_id)): ...
    """
    return authenticate(request.headers.get("Authorization"))

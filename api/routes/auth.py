"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /auth/register  -- create an account; returns {user, token} (201)
  POST /auth/login     -- exchange email/password for {user, token} (200)

Both endpoints are public. There is no logout route: tokens are stateless,
so "logging out" is the client discarding its token.

Security:
  Both routes are rate-limited per client IP (AUTH_RATE_LIMIT setting); a
  request over the limit gets 429 with Retry-After.
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Wrong email and wrong password produce the same 401 body.
  Cache-Control: no-store on every response that carries a token.
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from api.limiter import auth_rate_limit, limiter
from api.models import AuthResponse, ErrorResponse, LoginRequest, RegisterRequest, UserOut
from auth.models import User
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, hash_password

logger = logging.getLogger("catalog.auth")

router = APIRouter()


def _auth_response(user: User, status_code: int) -> JSONResponse:
    token = create_access_token(user.id)
    resp = JSONResponse(
        status_code=status_code,
        content=AuthResponse(
            user=UserOut(id=user.id, email=user.email, name=user.name),
            token=token,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


def _conflict() -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={"code": "conflict", "message": "User already exists"},
    )


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
@limiter.limit(auth_rate_limit)  # innermost, so the router registers the rate-limited wrapper
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and return it together with a fresh token.

    The pre-check gives the common duplicate case a clean 409 without a
    failed INSERT; the IntegrityError branch covers two registrations for
    the same email racing past the pre-check.
    """
    if not body.email or not body.password or not body.name:
        raise HTTPException(
            status_code=400,
            detail={"code": "missing_fields", "message": "Missing required fields"},
        )

    user_store: UserStore = request.app.state.user_store
    if user_store.get_by_email(body.email) is not None:
        raise _conflict()

    try:
        user = user_store.create_user(
            User(email=body.email, name=body.name, hashed_password=hash_password(body.password))
        )
    except IntegrityError as exc:
        raise _conflict() from exc

    logger.info("Registered user %s", user.id)
    return _auth_response(user, status_code=201)


@router.post(
    "/auth/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
)
@limiter.limit(auth_rate_limit)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password."""
    if not body.email or not body.password:
        raise HTTPException(
            status_code=400,
            detail={"code": "missing_fields", "message": "Email and password are required"},
        )

    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.warning("Failed login from %s", request.client.host if request.client else "unknown")
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(code="bad_credentials", error="Invalid credentials").model_dump(exclude_none=True),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    return _auth_response(user, status_code=200)

import logging
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Request

from healthcare.core.auth import Caller, validate_access_token
from healthcare.core.errors import Forbidden, Unauthorized
from healthcare.core.sessions import SessionStore
from healthcare.db.session import get_db_session

logger = logging.getLogger(__name__)

# Paths that never need a caller identity
PUBLIC_PATHS = [
    "/api/auth/login",
    "/api/auth/register",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
]


# -------------------------------------------------------------------------------------
# Caller resolution
# -------------------------------------------------------------------------------------
@dataclass(frozen=True)
class ViaToken:
    caller: Caller


@dataclass(frozen=True)
class ViaSession:
    caller: Caller
    session_id: str


@dataclass(frozen=True)
class Unresolved:
    # True when a bearer token was presented and failed validation
    token_rejected: bool = False


CallerResolution = Union[ViaToken, ViaSession, Unresolved]


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the credential from an ``Authorization: Bearer <token>`` header.

    Returns None when the header is absent or uses another scheme, and an
    empty string for a Bearer header that carries no token.
    """
    if not authorization:
        return None
    scheme, _, credentials = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credentials.strip()


def resolve_caller(
    authorization: Optional[str],
    session_id: Optional[str],
    sessions: SessionStore,
    secret_key: Optional[str] = None,
) -> CallerResolution:
    """Token-first resolution policy.

    A bearer token, when present, decides the outcome on its own: a valid one
    resolves the caller, an invalid one rejects the request without looking
    at the session. Only requests without a bearer token fall back to the
    server-side session.
    """
    token = bearer_token(authorization)
    if token is not None:
        caller = validate_access_token(token, secret_key=secret_key)
        if caller is None:
            return Unresolved(token_rejected=True)
        return ViaToken(caller)

    caller = sessions.get(session_id)
    if caller is not None:
        return ViaSession(caller, session_id)
    return Unresolved()


def _resolve_request(request: Request) -> CallerResolution:
    app_state = request.app.state
    return resolve_caller(
        request.headers.get("Authorization"),
        request.cookies.get(app_state.settings.session_cookie_name),
        app_state.session_store,
        secret_key=app_state.settings.secret_key,
    )


async def resolve_caller_middleware(request: Request, call_next):
    """
    Middleware that resolves the caller identity once per request and stores
    it on request.state. It never rejects; get_current_user does that.
    """
    if any(request.url.path.startswith(public_path) for public_path in PUBLIC_PATHS):
        return await call_next(request)

    request.state.caller_resolution = _resolve_request(request)
    return await call_next(request)


# FastAPI dependency for protected routes
def get_current_user(request: Request) -> Caller:
    """
    Dependency to use in FastAPI route functions that require authentication.
    Raises Forbidden for a rejected bearer token and Unauthorized when no
    identity could be resolved.
    """
    resolution = getattr(request.state, "caller_resolution", None)
    if resolution is None:
        resolution = _resolve_request(request)
        request.state.caller_resolution = resolution

    if isinstance(resolution, (ViaToken, ViaSession)):
        return resolution.caller
    if resolution.token_rejected:
        logger.info(f"Rejected bearer token on {request.method} {request.url.path}")
        raise Forbidden("Invalid or expired token")
    raise Unauthorized()


# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session

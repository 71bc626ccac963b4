import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from healthcare.config.settings import Settings
from healthcare.core.auth import Caller, create_access_token, get_password_hash, verify_password
from healthcare.core.errors import Conflict, InvalidCredentials, Unauthorized
from healthcare.core.sessions import SessionStore
from healthcare.db.crud.user import create_user, get_user, get_user_by_email
from healthcare.db.models.user import UserModel
from healthcare.schemas.auth_response import AuthResponse
from healthcare.schemas.login_request import LoginRequest
from healthcare.schemas.register_request import RegisterRequest
from healthcare.schemas.shared import UserOut

logger = logging.getLogger(__name__)


def issue_credentials(
    user: UserModel,
    sessions: SessionStore,
    app_settings: Settings,
    previous_session_id: Optional[str] = None,
) -> Tuple[AuthResponse, str]:
    """Open a fresh session and sign a token for ``user``.

    Any session the client already held is destroyed first so a login never
    reuses a pre-existing session id.
    """
    sessions.destroy(previous_session_id)
    session_id = sessions.create(Caller(id=user.id, email=user.email))
    token = create_access_token(
        user.id,
        user.email,
        timedelta(minutes=app_settings.access_token_expire_minutes),
        secret_key=app_settings.secret_key,
    )
    user_out = UserOut.model_validate(user)
    return AuthResponse(**user_out.model_dump(), token=token), session_id


async def register_user(db: AsyncSession, data: RegisterRequest) -> UserModel:
    """Create a user; the email must not be registered yet."""
    if await get_user_by_email(db, data.email):
        logger.info(f"Registration refused, email already exists: {data.email}")
        raise Conflict("Email already exists")

    hashed = await run_in_threadpool(get_password_hash, data.password)
    # the unique index still catches a concurrent registration of the same email
    return await create_user(db, name=data.name, email=data.email, password_hash=hashed)


async def authenticate_user(db: AsyncSession, login_data: LoginRequest) -> UserModel:
    user = await get_user_by_email(db, login_data.email)
    if not user:
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()
    if not await run_in_threadpool(verify_password, login_data.password, user.password):
        logger.info(f"Login failed: bad password for user {user.id}")
        raise InvalidCredentials()
    return user


async def current_user(db: AsyncSession, caller: Caller) -> UserOut:
    user = await get_user(db, caller.id)
    if not user:
        raise Unauthorized("User not found")
    return UserOut.model_validate(user)

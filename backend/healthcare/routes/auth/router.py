from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.middleware import get_current_user, get_db
from healthcare.routes.auth.services import (
    authenticate_user,
    current_user,
    issue_credentials,
    register_user,
)
from healthcare.schemas.auth_response import AuthResponse
from healthcare.schemas.login_request import LoginRequest
from healthcare.schemas.register_request import RegisterRequest
from healthcare.schemas.shared import ERROR_RESPONSES, MessageResponse, UserOut

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
    responses=ERROR_RESPONSES,
)

user_router = APIRouter(prefix="/api", tags=["auth"], responses=ERROR_RESPONSES)


def _set_session_cookie(request: Request, response: Response, session_id: str) -> None:
    app_settings = request.app.state.settings
    # Set HttpOnly cookie
    response.set_cookie(
        key=app_settings.session_cookie_name,
        value=session_id,
        httponly=True,
        secure=app_settings.secure_cookie,
        samesite="lax",
        max_age=app_settings.session_expire_minutes * 60,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    new_user = await register_user(db, user_data)
    app_state = request.app.state
    body, session_id = issue_credentials(
        new_user,
        app_state.session_store,
        app_state.settings,
        request.cookies.get(app_state.settings.session_cookie_name),
    )
    _set_session_cookie(request, response, session_id)
    return body


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    user = await authenticate_user(db, login_data)
    app_state = request.app.state
    body, session_id = issue_credentials(
        user,
        app_state.session_store,
        app_state.settings,
        request.cookies.get(app_state.settings.session_cookie_name),
    )
    _set_session_cookie(request, response, session_id)
    return body


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response):
    app_state = request.app.state
    cookie_name = app_state.settings.session_cookie_name
    app_state.session_store.destroy(request.cookies.get(cookie_name))
    response.delete_cookie(key=cookie_name)
    return MessageResponse(message="Successfully logged out")


@user_router.get("/user", response_model=UserOut)
async def me(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return await current_user(db, caller)

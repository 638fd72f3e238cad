from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.deps import get_current_user, get_settings
from app.core.config import Settings
from app.core.rate_limit import auth_rate_limit
from app.database import get_session
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import (
    AccountDelete,
    AuthData,
    PasswordChange,
    ProfileUpdate,
    UserCreate,
    UserData,
    UserLogin,
    UserRead,
)
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_data(user: User, token: str) -> AuthData:
    return AuthData(user=UserRead.model_validate(user), token=token)


# Registro
@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)],
)
def register(
    user_create: UserCreate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user, token = auth_service.register(
        session, user_create.email, user_create.password, user_create.name, settings=settings
    )
    return ApiResponse(message="User registered successfully", data=_auth_data(user, token))


# Login
@router.post("/login", response_model=ApiResponse[AuthData], dependencies=[Depends(auth_rate_limit)])
def login(
    credentials: UserLogin,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user, token = auth_service.login(session, credentials.email, credentials.password, settings=settings)
    return ApiResponse(message="Login successful", data=_auth_data(user, token))


# El JWT no tiene estado: el cliente simplemente descarta el token
@router.post("/logout", response_model=ApiResponse[dict])
def logout():
    return ApiResponse(message="Logout successful", data={})


@router.get("/me", response_model=ApiResponse[UserData])
def read_users_me(user: User = Depends(get_current_user)):
    return ApiResponse(message="User retrieved successfully", data=UserData(user=UserRead.model_validate(user)))


@router.put("/profile", response_model=ApiResponse[UserData])
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    updated = auth_service.update_profile(session, user.id, name=payload.name, email=payload.email)
    return ApiResponse(message="Profile updated successfully", data=UserData(user=UserRead.model_validate(updated)))


@router.put("/password", response_model=ApiResponse[dict])
def change_password(
    payload: PasswordChange,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    auth_service.change_password(session, user.id, payload.current_password, payload.new_password)
    return ApiResponse(message="Password changed successfully", data={})


@router.delete("/account", response_model=ApiResponse[dict])
def delete_account(
    payload: AccountDelete,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    auth_service.delete_account(session, user.id, payload.password)
    return ApiResponse(message="Account deleted successfully", data={})

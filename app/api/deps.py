from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.config import Settings
from app.core.errors import Unauthorized
from app.core.security import bearer_scheme
from app.database import get_session
from app.models.user import User
from app.services import auth as auth_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access token required", error="No token provided")
    return auth_service.get_current_user(session, credentials.credentials, settings)

"""
Auth service - registro, login y gestión de la cuenta del usuario.

Los correos se guardan y se comparan en minúsculas. El token es un JWT
sin estado: cerrar sesión consiste en que el cliente lo descarte.
"""

import logging
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.config import Settings
from app.core.errors import BadRequest, Conflict, NotFound, Unauthorized
from app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from app.models.payment import Payment
from app.models.user import User
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def _find_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.strip().lower())).first()


def create_user_token(user: User, settings: Optional[Settings] = None) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email}, settings=settings)


def _commit_unique_email(session: Session, message: str) -> None:
    # Otra petición pudo guardar el mismo correo entre la comprobación y el commit
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(message)


def register(
    session: Session,
    email: str,
    password: str,
    name: str,
    settings: Optional[Settings] = None,
) -> Tuple[User, str]:
    if _find_by_email(session, email):
        raise Conflict("User already exists")

    user = User(
        email=email.strip().lower(),
        name=name.strip(),
        hashed_password=get_password_hash(password),
    )
    session.add(user)
    _commit_unique_email(session, "User already exists")
    session.refresh(user)

    logger.info("User registered user_id=%s", user.id)
    return user, create_user_token(user, settings)


def login(session: Session, email: str, password: str, settings: Optional[Settings] = None) -> Tuple[User, str]:
    user = _find_by_email(session, email)
    if not user or not verify_password(password, user.hashed_password):
        raise Unauthorized("Invalid credentials")

    logger.info("User logged in user_id=%s", user.id)
    return user, create_user_token(user, settings)


def get_current_user(session: Session, token: str, settings: Optional[Settings] = None) -> User:
    user_id = decode_access_token(token, settings)
    user = session.get(User, user_id)
    if not user:
        raise Unauthorized("Invalid token", error="User not found")
    return user


def _get_user(session: Session, user_id: UUID) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def update_profile(
    session: Session,
    user_id: UUID,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    user = _get_user(session, user_id)

    if email is not None:
        email = email.strip().lower()
        if email != user.email:
            other = _find_by_email(session, email)
            if other and other.id != user.id:
                raise Conflict("Email already in use")
            user.email = email
    if name is not None:
        user.name = name.strip()

    user.updated_at = utcnow()
    session.add(user)
    _commit_unique_email(session, "Email already in use")
    session.refresh(user)

    logger.info("User profile updated user_id=%s", user_id)
    return user


def change_password(session: Session, user_id: UUID, current_password: str, new_password: str) -> None:
    user = _get_user(session, user_id)
    if not verify_password(current_password, user.hashed_password):
        raise BadRequest("Current password is incorrect")

    user.hashed_password = get_password_hash(new_password)
    user.updated_at = utcnow()
    session.add(user)
    session.commit()

    logger.info("User password changed user_id=%s", user_id)


def delete_account(session: Session, user_id: UUID, password: str) -> int:
    """Elimina al usuario y todos sus pagos. Devuelve cuántos pagos se borraron."""
    user = _get_user(session, user_id)
    if not verify_password(password, user.hashed_password):
        raise BadRequest("Password is incorrect")

    payments = session.exec(select(Payment).where(Payment.user_id == user_id)).all()
    for payment in payments:
        session.delete(payment)
    removed = len(payments)
    session.flush()
    session.delete(user)
    session.commit()

    logger.info("User account deleted user_id=%s payments_removed=%s", user_id, removed)
    return removed

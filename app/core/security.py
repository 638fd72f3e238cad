from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi.security import HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings, settings as default_settings
from app.core.errors import Unauthorized

# Manejo de contraseñas
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Esquema Bearer; auto_error=False para responder con nuestro propio sobre
bearer_scheme = HTTPBearer(auto_error=False)


# Funciones de seguridad
def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None, settings: Optional[Settings] = None):
    settings = settings or default_settings
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> UUID:
    """Devuelve el id de usuario del token o lanza Unauthorized."""
    settings = settings or default_settings
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        user_id_str: str = payload.get("sub")
        if user_id_str is None:
            raise Unauthorized("Invalid token", error="Token verification failed")
        return UUID(user_id_str)
    except (JWTError, ValueError):
        raise Unauthorized("Invalid token", error="Token verification failed")

from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, StringConstraints, field_validator
from typing_extensions import Annotated

from app.schemas.common import CamelModel, UtcDatetime

Password = Annotated[str, StringConstraints(min_length=6)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]


def _lower_email(value):
    return value.strip().lower() if isinstance(value, str) else value


class UserCreate(CamelModel):
    email: EmailStr
    password: Password
    name: Name

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _lower_email(value)


class UserLogin(CamelModel):
    email: EmailStr
    password: Password

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _lower_email(value)


class ProfileUpdate(CamelModel):
    name: Optional[Name] = None
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _lower_email(value)


class PasswordChange(CamelModel):
    current_password: Password
    new_password: Password


class AccountDelete(CamelModel):
    password: Password


class UserRead(CamelModel):
    id: UUID = Field(alias="_id")
    email: str
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AuthData(CamelModel):
    user: UserRead
    token: str


class UserData(CamelModel):
    user: UserRead

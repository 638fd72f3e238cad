from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer, model_serializer
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from app.utils.dates import isoformat_utc

T = TypeVar("T")

# Fechas UTC → "2025-01-01T00:00:00.000Z" en JSON
UtcDatetime = Annotated[datetime, PlainSerializer(isoformat_utc, return_type=str, when_used="json")]


class CamelModel(BaseModel):
    """Campos snake_case en Python, camelCase en el JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Sobre común de todas las respuestas: {success, message?, data?, error?}."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[str] = None

    @model_serializer(mode="wrap")
    def drop_empty_keys(self, handler):
        # Solo las claves del sobre; dentro de data los null se conservan
        return {key: value for key, value in handler(self).items() if value is not None}

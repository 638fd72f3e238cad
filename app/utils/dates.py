import datetime as dt


def utcnow() -> dt.datetime:
    """Datetime aware en UTC, como se guarda en la base de datos."""
    return dt.datetime.now(dt.timezone.utc)


def normalize_dt(value: dt.datetime) -> dt.datetime:
    """Normaliza a datetime aware en UTC.

    SQLite devuelve las columnas sin tzinfo aunque se guarden en UTC, así que
    un valor naive se interpreta como UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def isoformat_utc(value: dt.datetime) -> str:
    """Serializa un datetime UTC como ISO 8601 con sufijo Z."""
    value = normalize_dt(value).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"

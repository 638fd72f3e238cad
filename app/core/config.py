import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()  # Carga las variables de entorno


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:19006",
    "exp://localhost:19000",
    "http://localhost:8081",
    "pocketdue://",
]


@dataclass
class Settings:
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./pocketdue.db"))
    database_echo: bool = field(default_factory=lambda: _env_bool("DATABASE_ECHO"))

    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "dev-secret-change-me"))
    algorithm: str = field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))
    # 7 days
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
    )

    allowed_origins: List[str] = field(default_factory=lambda: _env_list("ALLOWED_ORIGINS", DEFAULT_ORIGINS))

    auth_rate_limit_max: int = field(default_factory=lambda: int(os.getenv("AUTH_RATE_LIMIT_MAX", "5")))
    api_rate_limit_max: int = field(default_factory=lambda: int(os.getenv("API_RATE_LIMIT_MAX", "100")))
    rate_limit_window_seconds: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900")))
    rate_limit_sweep_seconds: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_SWEEP_SECONDS", "300")))

    # "keep": un pago completado se conserva; "remove": se elimina al completarse
    completed_payment_policy: str = field(default_factory=lambda: os.getenv("COMPLETED_PAYMENT_POLICY", "keep"))

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def __post_init__(self):
        if self.completed_payment_policy not in ("keep", "remove"):
            raise ValueError(
                f"COMPLETED_PAYMENT_POLICY must be 'keep' or 'remove', got {self.completed_payment_policy!r}"
            )

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


settings = Settings()

"""
Rate limiter de ventana fija por clave (IP del cliente).

El limitador se inyecta: cada aplicación crea los suyos y los guarda en
app.state, de modo que no hay estado global del proceso.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict

from fastapi import Request, Response

from app.core.errors import RateLimited

logger = logging.getLogger(__name__)


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch en segundos
    retry_after: float = 0.0


class RateLimiter(ABC):
    @abstractmethod
    def check(self, key: str) -> RateLimitDecision:
        """Registra un intento para `key` y decide si se permite."""

    def reset(self) -> None:
        """Olvida todos los contadores."""


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter(RateLimiter):
    """Contadores en memoria; válido para una sola instancia del servidor."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        sweep_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_seconds = sweep_seconds
        self.clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check(self, key: str) -> RateLimitDecision:
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.sweep_seconds:
                self._sweep(now)

            window = self._windows.get(key)
            if window is None or window.reset_at <= now:
                window = _Window(count=0, reset_at=now + self.window_seconds)
                self._windows[key] = window

            if window.count >= self.max_requests:
                return RateLimitDecision(False, self.max_requests, 0, window.reset_at, window.reset_at - now)

            window.count += 1
            return RateLimitDecision(True, self.max_requests, self.max_requests - window.count, window.reset_at)

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if window.reset_at <= now]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self):
        return len(self._windows)


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimit:
    """Dependencia de FastAPI que aplica el limitador guardado en app.state.<name>."""

    def __init__(self, name: str, message: str = "Too many requests"):
        self.name = name
        self.message = message

    def __call__(self, request: Request, response: Response) -> None:
        limiter: RateLimiter = getattr(request.app.state, self.name)
        key = client_key(request)
        decision = limiter.check(key)

        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(int(decision.reset_at)),
        }
        if not decision.allowed:
            logger.warning("Rate limit exceeded limiter=%s key=%s", self.name, key)
            headers["Retry-After"] = str(max(0, int(decision.retry_after)))
            raise RateLimited(self.message, error="Rate limit exceeded", headers=headers)

        response.headers.update(headers)


auth_rate_limit = RateLimit("auth_limiter", "Too many authentication attempts")
api_rate_limit = RateLimit("api_limiter", "Too many API requests")

"""
Módulo de servicio de rate limiting en memoria.
"""
import time
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.settings import Settings
from app.errors import RateLimitError
from app.schemas import RateLimitResult
from app.database import MemoryStore

@dataclass(frozen=True)
class RateLimitPolicy:
    name: str
    max_requests: int
    window_seconds: int

class RateLimitService:
    """
    Ventanas fijas por identificador sobre el almacén en memoria.

    Los contadores viven en este proceso: con varias instancias el límite es
    por instancia.
    """
    def __init__(self, store: MemoryStore, clock: Callable[[], float] = time.time):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.store = store
        self.clock = clock
        self.policies: Dict[str, RateLimitPolicy] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: Settings, store: MemoryStore) -> "RateLimitService":
        service = cls(store)
        service.register(RateLimitPolicy("photo-upload", settings.UPLOAD_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS))
        service.register(RateLimitPolicy("album-ops", settings.ALBUM_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS))
        for role in ("admin", "viewer"):
            service.register(RateLimitPolicy(f"login-{role}", settings.LOGIN_MAX_ATTEMPTS, settings.LOGIN_WINDOW_SECONDS))
        return service

    def register(self, policy: RateLimitPolicy) -> None:
        self.policies[policy.name] = policy

    def policy(self, name: str) -> RateLimitPolicy:
        return self.policies[name]

    @staticmethod
    def _key(identifier: str, policy: RateLimitPolicy) -> str:
        return f"{policy.name}:{identifier}"

    def _current(self, key: str) -> Optional[dict]:
        entry = self.store.get(key)
        if entry is None or entry["reset_at"] <= self.clock():
            return None
        return entry

    def check(self, identifier: str, policy: RateLimitPolicy) -> RateLimitResult:
        """
        Cuenta una petición y decide si está permitida.

        Args:
            identifier (str): IP del cliente (o "unknown").
            policy (RateLimitPolicy): Límite aplicado.

        Returns:
            RateLimitResult: Resultado con restantes y reinicio en epoch ms.
        """
        now = self.clock()
        key = self._key(identifier, policy)
        entry = self._current(key)

        if entry is None:
            entry = {"count": 1, "reset_at": now + policy.window_seconds}
            self.store.set(key, entry, policy.window_seconds)
            return RateLimitResult(
                success=True,
                limit=policy.max_requests,
                remaining=policy.max_requests - 1,
                reset_time=int(entry["reset_at"] * 1000),
            )

        reset_time = int(entry["reset_at"] * 1000)
        if entry["count"] >= policy.max_requests:
            return RateLimitResult(success=False, limit=policy.max_requests, remaining=0, reset_time=reset_time)

        entry["count"] += 1
        self.store.set(key, entry, entry["reset_at"] - now)
        return RateLimitResult(
            success=True,
            limit=policy.max_requests,
            remaining=policy.max_requests - entry["count"],
            reset_time=reset_time,
        )

    def enforce(self, identifier: str, policy: RateLimitPolicy) -> RateLimitResult:
        """
        Igual que `check`, pero lanza RateLimitError si se excede el límite.
        """
        result = self.check(identifier, policy)
        if not result.success:
            self.logger.warning(f"Rate limit '{policy.name}' excedido por {identifier}")
            raise RateLimitError(
                "Too many requests. Please try again later.",
                reset_time=result.reset_time,
                limit=result.limit,
            )
        return result

    # INTENTOS DE LOGIN (solo cuentan los fallos)
    def is_limited(self, identifier: str, policy: RateLimitPolicy) -> Optional[int]:
        """
        Returns:
            Optional[int]: Epoch ms del reinicio si el identificador está bloqueado.
        """
        entry = self._current(self._key(identifier, policy))
        if entry is not None and entry["count"] >= policy.max_requests:
            return int(entry["reset_at"] * 1000)
        return None

    def record_failure(self, identifier: str, policy: RateLimitPolicy) -> int:
        """Registra un intento fallido y devuelve el total de la ventana."""
        with self._lock:
            now = self.clock()
            key = self._key(identifier, policy)
            entry = self._current(key)
            if entry is None:
                entry = {"count": 0, "reset_at": now + policy.window_seconds}
            entry["count"] += 1
            self.store.set(key, entry, entry["reset_at"] - now)
            return entry["count"]

    def reserve_attempt(self, identifier: str, policy: RateLimitPolicy) -> Optional[int]:
        """
        Cuenta un intento como fallido antes de verificarlo.

        La comprobación y el incremento son atómicos, así que una ráfaga de
        intentos concurrentes no puede superar el límite. Un login correcto
        limpia el contador con `clear`.

        Returns:
            Optional[int]: Total de la ventana, o None si ya está bloqueado.
        """
        with self._lock:
            if self.is_limited(identifier, policy) is not None:
                return None
            return self.record_failure(identifier, policy)

    def clear(self, identifier: str, policy: RateLimitPolicy) -> None:
        with self._lock:
            self.store.delete(self._key(identifier, policy))

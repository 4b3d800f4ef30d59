"""
Almacén clave-valor con expiración para estado efímero del proceso
(contadores de rate limiting, tokens CSRF, sesiones revocadas).
"""
import time
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

class MemoryStore(ABC):
    """
    Interfaz del almacén con TTL. La implementación en memoria solo es válida
    con un único proceso; un despliegue con varias instancias necesita un
    almacén externo que cumpla esta misma interfaz.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Devuelve el valor o None si no existe o expiró."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Guarda el valor durante `ttl_seconds`."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Elimina la clave si existe."""

    @abstractmethod
    def sweep(self) -> int:
        """Elimina las entradas expiradas y devuelve cuántas se borraron."""


class InMemoryStore(MemoryStore):
    """
    Diccionario protegido por lock. La expiración se comprueba de forma
    perezosa en cada lectura y, además, con un barrido periódico.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._clock = clock
        self._data: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self._clock():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        with self._lock:
            self._data[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._data.items() if expires_at <= now]
            for key in expired:
                del self._data[key]
        if expired:
            self.logger.debug(f"Barrido del almacén: {len(expired)} entradas expiradas")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

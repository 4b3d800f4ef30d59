"""
Módulo de servicio de protección CSRF (double submit con registro en servidor).
"""
import hmac
import logging
import secrets
from typing import Optional

from app.settings import Settings
from app.errors import CsrfError
from app.schemas import SessionData
from app.database import MemoryStore

class CsrfService:
    """
    Emite, verifica y rota tokens CSRF ligados a una sesión.

    El token se guarda en una cookie legible por el cliente y en el almacén
    del servidor bajo el `jti` de la sesión. Una mutación es válida si el
    header coincide con la cookie y ambos con el token registrado.
    """
    def __init__(self, settings: Settings, store: MemoryStore):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings
        self.store = store

    @staticmethod
    def _key(session: SessionData) -> str:
        return f"csrf:{session.jti}"

    def issue(self, session: SessionData) -> str:
        token = secrets.token_urlsafe(32)
        self.store.set(self._key(session), token, self.settings.CSRF_MAX_AGE_SECONDS)
        return token

    def rotate(self, session: SessionData) -> str:
        """Reemplaza el token tras una mutación exitosa."""
        return self.issue(session)

    def verify(self, session: SessionData, cookie_token: Optional[str], header_token: Optional[str]) -> None:
        """
        Raises:
            CsrfError: Si falta algún token, no coinciden o no es el registrado.
        """
        if not cookie_token or not header_token:
            raise CsrfError("Invalid CSRF token")

        if not hmac.compare_digest(cookie_token.encode("utf-8"), header_token.encode("utf-8")):
            self.logger.warning(f"CSRF: header y cookie no coinciden (sesión {session.role})")
            raise CsrfError("Invalid CSRF token")

        stored = self.store.get(self._key(session))
        if not stored or not hmac.compare_digest(stored.encode("utf-8"), header_token.encode("utf-8")):
            self.logger.warning(f"CSRF: token no registrado o expirado (sesión {session.role})")
            raise CsrfError("Invalid CSRF token")

    def discard(self, session: SessionData) -> None:
        self.store.delete(self._key(session))

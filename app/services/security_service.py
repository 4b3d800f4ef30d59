"""
Módulo de seguridad: contraseñas y tokens de sesión.
"""
import logging
import secrets
from uuid import uuid4
from typing import Optional, Tuple
from jose import jwt, JWTError
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone

from app.settings import Settings
from app.enums import UserRole
from app.errors import ConfigError
from app.schemas import SessionData
from app.database import MemoryStore
from app.utils import get_now, to_epoch_ms

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_SCOPE = "session"
REVOKED_PREFIX = "revoked-session:"

class SecurityService:
    """
    Servicio de seguridad: verificación de contraseñas y sesiones firmadas.

    La sesión viaja en una cookie httpOnly como JWT firmado con SESSION_SECRET.
    El cierre de sesión revoca el `jti` en el almacén en memoria hasta que
    el token habría expirado.
    """
    def __init__(self, settings: Settings, store: MemoryStore):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings
        self.store = store

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verificar una contraseña plana contra una contraseña hash.

        Args:
            plain_password (str): La contraseña plana a verificar.
            hashed_password (str): El hash de la contraseña a comparar.

        Returns:
            bool: True si las contraseñas coinciden, False en caso contrario.
        """
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """
        Hash una contraseña plana utilizando bcrypt.

        Args:
            password (str): La contraseña plana a hashear.

        Returns:
            str: La contraseña hasheada.
        """
        return pwd_context.hash(password)

    @staticmethod
    def is_password_hash(value: str) -> bool:
        return pwd_context.identify(value) is not None

    def check_password(self, supplied: str, expected: str, label: str) -> bool:
        """
        Compara la contraseña enviada con la configurada.

        Args:
            supplied (str): Contraseña recibida en el login.
            expected (str): Valor configurado (hash bcrypt o texto plano).
            label (str): Nombre de la variable, para los mensajes.

        Returns:
            bool: True si coinciden.

        Raises:
            ConfigError: Si el valor configurado es texto plano y no se permite.
        """
        if self.is_password_hash(expected):
            return self.verify_password(supplied, expected)

        if not self.settings.ALLOW_PLAINTEXT_PASSWORDS:
            raise ConfigError(f"{label} must be a bcrypt hash")

        self.logger.warning(
            f"{label} está en texto plano. Genera un hash con 'python -m app.seed.hash_password'"
        )
        return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))

    # SESIONES
    def create_session(self, role: UserRole) -> Tuple[str, SessionData]:
        """
        Crea una sesión nueva de duración fija.

        Args:
            role (UserRole): Rol autenticado.

        Returns:
            Tuple[str, SessionData]: El JWT firmado y los datos de la sesión.
        """
        now = get_now()
        expires_at = now + timedelta(seconds=self.settings.SESSION_MAX_AGE_SECONDS)
        session = SessionData(
            user_id=role.value,
            role=role,
            created_at=now,
            is_logged_in=True,
            jti=uuid4().hex,
            expires_at=expires_at,
        )
        claims = {
            "sub": session.user_id,
            "role": role.value,
            "createdAt": to_epoch_ms(now),
            "isLoggedIn": True,
            "jti": session.jti,
            "scope": SESSION_SCOPE,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self.settings.SESSION_SECRET, algorithm=self.settings.ALGORITHM)
        return token, session

    def decode_session(self, token: Optional[str]) -> Optional[SessionData]:
        """
        Decodifica la cookie de sesión.

        Returns:
            Optional[SessionData]: None si falta, es inválida, expiró o fue revocada.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.settings.SESSION_SECRET, algorithms=[self.settings.ALGORITHM])
        except JWTError:
            return None

        if payload.get("scope") != SESSION_SCOPE or not payload.get("isLoggedIn"):
            return None

        jti = payload.get("jti")
        if not jti or self.store.get(REVOKED_PREFIX + jti):
            return None

        try:
            role = UserRole(payload.get("role"))
        except ValueError:
            return None

        return SessionData(
            user_id=payload.get("sub") or role.value,
            role=role,
            created_at=datetime.fromtimestamp(payload.get("createdAt", 0) / 1000, tz=timezone.utc),
            is_logged_in=True,
            jti=jti,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def revoke_session(self, session: SessionData) -> None:
        """Invalida el token hasta su expiración natural."""
        remaining = (session.expires_at - get_now()).total_seconds()
        if remaining > 0:
            self.store.set(REVOKED_PREFIX + session.jti, True, remaining)
        self.logger.info(f"Sesión {session.role} cerrada")

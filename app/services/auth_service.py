"""
Módulo de servicio de autenticación por contraseña compartida.
"""
import logging
from typing import Optional, Tuple

from app.settings import Settings
from app.enums import UserRole
from app.errors import AuthError, ConfigError, RateLimitError, ValidationError
from app.schemas import SessionData
from app.services.security_service import SecurityService
from app.services.rate_limit_service import RateLimitService, RateLimitPolicy

class AuthService:
    """
    Login de administrador y de visitante, con bloqueo por intentos fallidos.
    """
    def __init__(self, settings: Settings, security: SecurityService, rate_limiter: RateLimitService):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings
        self.security = security
        self.rate_limiter = rate_limiter

    def _expected_password(self, role: UserRole) -> Tuple[Optional[str], str]:
        if role == UserRole.ADMIN:
            return self.settings.ADMIN_PASSWORD, "ADMIN_PASSWORD"
        return self.settings.VIEWER_PASSWORD, "VIEWER_PASSWORD"

    def login(self, password: Optional[str], role: UserRole, identifier: str) -> Tuple[str, SessionData]:
        """
        Valida la contraseña del rol y crea una sesión.

        Args:
            password (Optional[str]): Contraseña enviada en el formulario.
            role (UserRole): Rol solicitado.
            identifier (str): Identificador del cliente para el bloqueo.

        Returns:
            Tuple[str, SessionData]: Token de sesión y sus datos.

        Raises:
            RateLimitError: Demasiados fallos recientes; no se comprueba la contraseña.
            ValidationError: Contraseña ausente o vacía.
            ConfigError: La contraseña del rol no está configurada.
            AuthError: Contraseña incorrecta.
        """
        policy = self.rate_limiter.policy(f"login-{role.value}")
        if self.rate_limiter.is_limited(identifier, policy) is not None:
            self._locked_out(role, identifier, policy)

        if not isinstance(password, str) or not password:
            raise ValidationError("Invalid password")

        expected, label = self._expected_password(role)
        if not expected:
            self.logger.error(f"{label} no está configurada")
            raise ConfigError(f"{label} is not configured")

        # El intento cuenta como fallo hasta que la contraseña se verifica
        attempts = self.rate_limiter.reserve_attempt(identifier, policy)
        if attempts is None:
            self._locked_out(role, identifier, policy)

        if not self.security.check_password(password, expected, label):
            self.logger.warning(f"Login {role} fallido desde {identifier} ({attempts}/{policy.max_requests})")
            raise AuthError("Incorrect password")

        self.rate_limiter.clear(identifier, policy)
        token, session = self.security.create_session(role)
        self.logger.info(f"Login {role} correcto desde {identifier}")
        return token, session

    def _locked_out(self, role: UserRole, identifier: str, policy: RateLimitPolicy) -> None:
        self.logger.warning(f"Login {role} bloqueado para {identifier}")
        raise RateLimitError(
            "Too many login attempts. Please try again later.",
            reset_time=self.rate_limiter.is_limited(identifier, policy) or 0,
            limit=policy.max_requests,
        )

    def logout(self, session: Optional[SessionData]) -> None:
        if session is not None:
            self.security.revoke_session(session)

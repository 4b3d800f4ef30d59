from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.enums import UserRole

class SessionData(BaseModel):
    """
    Datos de la sesión firmada en la cookie.

    Args:
        user_id (str): Identificador del usuario ("admin" o "viewer").
        role (UserRole): Rol de la sesión.
        created_at (datetime): Momento del login.
        is_logged_in (bool): Siempre True para sesiones válidas.
        jti (str): Identificador único del token, usado para revocarlo.
        expires_at (datetime): Expiración fija (sin renovación deslizante).
    """
    user_id: str
    role: UserRole
    created_at: datetime
    is_logged_in: bool = True
    jti: str
    expires_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def is_admin(self) -> bool:
        return self.is_logged_in and self.role == UserRole.ADMIN


class CsrfTokenResponse(BaseModel):
    """
    Esquema para el token CSRF.

    Args:
        csrf_token (str): Token a enviar en la cabecera x-csrf-token.
    """
    csrf_token: str

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"csrfToken": "Zr3q8m0Yp6cD2l1d4N8xH0uQ1mB9vK7e"}]}
    )

"""
Módulo para definir las rutas de autenticación de la API.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Form, Request, Response

from app.enums import UserRole
from app.settings import Settings
from app.schemas import SessionData
from app.services import AuthService, CsrfService
from app.api.cookies import set_session_cookie, clear_session_cookie, clear_csrf_cookie
from app.api.dependencies import (
    get_auth_service,
    get_csrf_service,
    get_settings_instance,
    get_client_identifier,
    get_optional_session
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

def _login(role: UserRole, password: Optional[str], request: Request, response: Response,
           auth_service: AuthService, settings: Settings) -> dict:
    token, session = auth_service.login(password, role, get_client_identifier(request))
    set_session_cookie(response, token, settings)
    return {"ok": True, "role": session.role.value}

@router.post("/login")
def admin_login(
    request: Request,
    response: Response,
    password: Optional[str] = Form(None),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Login del administrador con la contraseña compartida."""
    return _login(UserRole.ADMIN, password, request, response, auth_service, settings)

@router.post("/viewer")
def viewer_login(
    request: Request,
    response: Response,
    password: Optional[str] = Form(None),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Login de visitante (solo lectura)."""
    return _login(UserRole.VIEWER, password, request, response, auth_service, settings)

@router.post("/logout")
def logout(
    response: Response,
    session: Optional[SessionData] = Depends(get_optional_session),
    auth_service: AuthService = Depends(get_auth_service),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Cierra la sesión: revoca el token y borra las cookies."""
    if session is not None:
        csrf_service.discard(session)
    auth_service.logout(session)
    clear_session_cookie(response, settings)
    clear_csrf_cookie(response, settings)
    return {"ok": True}

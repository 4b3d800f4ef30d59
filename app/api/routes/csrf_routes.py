"""
Módulo de rutas para obtener el token CSRF.
"""
from fastapi import APIRouter, Depends, Response

from app.settings import Settings
from app.schemas import SessionData, CsrfTokenResponse
from app.services import CsrfService
from app.api.cookies import set_csrf_cookie
from app.api.dependencies import get_current_admin, get_csrf_service, get_settings_instance

router = APIRouter(prefix="/admin", tags=["CSRF"])

@router.get("/csrf", response_model=CsrfTokenResponse, response_model_by_alias=True)
def get_csrf_token(
    response: Response,
    session: SessionData = Depends(get_current_admin),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Emite un token CSRF para la sesión de administrador y lo guarda en cookie."""
    token = csrf_service.issue(session)
    set_csrf_cookie(response, token, settings)
    return CsrfTokenResponse(csrf_token=token)

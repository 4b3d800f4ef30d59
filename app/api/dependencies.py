"""
Dependencias para inyectar en la API
"""
from typing import Callable, Optional
from fastapi import Depends, Request

from app.settings import Settings
from app.errors import AuthError, PermissionDeniedError
from app.schemas import SessionData
from app.api.container import ServiceContainer
from app.services import (
    AuthService,
    CsrfService,
    RateLimitService,
    ImageService,
    StorageService,
    AlbumService,
    PhotoService
)

# ============ Proveedores de Servicios ============
def get_services(request: Request) -> ServiceContainer:
    """Contenedor creado por la factory de la aplicación."""
    return request.app.state.services

def get_settings_instance(services: ServiceContainer = Depends(get_services)) -> Settings:
    """Provee una instancia de Settings."""
    return services.settings

def get_auth_service(services: ServiceContainer = Depends(get_services)) -> AuthService:
    return services.auth

def get_csrf_service(services: ServiceContainer = Depends(get_services)) -> CsrfService:
    return services.csrf

def get_rate_limiter(services: ServiceContainer = Depends(get_services)) -> RateLimitService:
    return services.rate_limiter

def get_storage_service(services: ServiceContainer = Depends(get_services)) -> StorageService:
    return services.storage

def get_image_service(services: ServiceContainer = Depends(get_services)) -> ImageService:
    return services.images

def get_albums_service(services: ServiceContainer = Depends(get_services)) -> AlbumService:
    return services.albums

def get_photos_service(services: ServiceContainer = Depends(get_services)) -> PhotoService:
    return services.photos

# ============ Identificación del cliente ============
def get_client_identifier(request: Request) -> str:
    """
    Identificador para rate limiting: primera IP de X-Forwarded-For, luego
    X-Real-IP, luego la dirección del socket, o "unknown".
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"

# ============ Dependencias de Sesión ============
def get_optional_session(
    request: Request,
    services: ServiceContainer = Depends(get_services)
) -> Optional[SessionData]:
    """Sesión de la cookie, o None si falta, es inválida o fue revocada."""
    token = request.cookies.get(services.settings.SESSION_COOKIE_NAME)
    return services.security.decode_session(token)

def get_current_session(session: Optional[SessionData] = Depends(get_optional_session)) -> SessionData:
    """
    Exige una sesión válida de cualquier rol.

    Raises:
        AuthError: 401 si no hay sesión.
    """
    if session is None or not session.is_logged_in:
        raise AuthError("Unauthorized")
    return session

def get_current_admin(session: SessionData = Depends(get_current_session)) -> SessionData:
    """
    Asegura que la sesión tenga privilegios de administrador.

    Raises:
        PermissionDeniedError: 403 si la sesión es de visitante.
    """
    if not session.is_admin:
        raise PermissionDeniedError("Forbidden")
    return session

def admin_mutation(rate_limit: Optional[str] = None) -> Callable[..., SessionData]:
    """
    Construye la dependencia de las mutaciones de administración. Comprueba,
    en este orden: sesión de administrador, límite de peticiones (si se
    indica la política) y token CSRF.

    Args:
        rate_limit (Optional[str]): Nombre de la política de rate limiting.
    """
    def dependency(
        request: Request,
        session: SessionData = Depends(get_current_admin),
        services: ServiceContainer = Depends(get_services)
    ) -> SessionData:
        if rate_limit is not None:
            policy = services.rate_limiter.policy(rate_limit)
            services.rate_limiter.enforce(get_client_identifier(request), policy)

        settings = services.settings
        services.csrf.verify(
            session,
            cookie_token=request.cookies.get(settings.CSRF_COOKIE_NAME),
            header_token=request.headers.get(settings.CSRF_HEADER_NAME),
        )
        return session

    return dependency

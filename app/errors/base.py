from typing import Any, Dict, Optional

class LudoError(Exception):
    """Base para todos los errores de la aplicación."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ValidationError(LudoError):
    """Error de validación de datos o reglas de negocio."""
    pass

class NotFoundError(LudoError):
    """Cuando un recurso (Album, Photo) no existe."""
    pass

class AuthError(LudoError):
    """Sesión ausente, inválida o expirada."""
    pass

class PermissionDeniedError(AuthError):
    """Cuando la sesión es válida pero su rol no alcanza para la acción."""
    pass

class CsrfError(LudoError):
    """Token CSRF ausente o que no coincide con el emitido para la sesión."""
    pass

class RateLimitError(LudoError):
    """Se superó el número de intentos permitidos en la ventana actual."""
    def __init__(self, message: str, reset_time: int, limit: int, remaining: int = 0):
        super().__init__(
            message=message,
            details={"reset_time": reset_time, "limit": limit, "remaining": remaining}
        )
        self.reset_time = reset_time
        self.limit = limit
        self.remaining = remaining

class StorageError(LudoError):
    """Errores del backend de almacenamiento (disco, B2, Vercel Blob)."""
    pass

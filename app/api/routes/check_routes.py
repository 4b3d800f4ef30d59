"""
Módulo para la ruta de check health
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_settings_instance
from app.settings import Settings
from app.settings.env_validation import validate_environment
from app.utils import get_now

router = APIRouter(tags=["Check-Health"])

@router.get("/health", status_code=status.HTTP_200_OK)
def health_check(settings: Settings = Depends(get_settings_instance)):
    """Verifica que la API responde y que la configuración es válida."""
    result = validate_environment(settings)
    if not result.is_valid:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": result.errors[0]},
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ok",
            "timestamp": get_now().isoformat(),
            "version": settings.APP_VERSION,
        }
    )

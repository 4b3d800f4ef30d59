""" 
Entrypoint de la API
"""
import sys
import uvicorn

from app.api.app_factory import create_app
from app.errors import ConfigError
from app.settings import settings, LudoLogger
from app.settings.env_validation import log_environment_validation
from app.api.errors import register_error_handlers

# Inicializamos el logger
LudoLogger.setup_logging(settings, level=settings.API_LOG_LEVEL)

# Una configuración inválida no debe llegar a servir peticiones
try:
    log_environment_validation(settings)
except ConfigError as e:
    print(f" ERROR DE CONFIGURACIÓN: {e.message}")
    for error in e.details.get("errors", []):
        print(f"  - {error}")
    sys.exit(1)

# Creamos la app de la API
app = create_app(settings=settings)

# Handler de manejo de errores de la API
register_error_handlers(app)

def run_server():
    """
    Run the FastAPI server.
    """
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.API_LOG_LEVEL,
        reload=settings.API_RELOAD,
    )

if __name__ == "__main__":
    run_server()

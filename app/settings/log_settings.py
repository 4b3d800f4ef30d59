import logging
from typing import Optional
from logging.handlers import RotatingFileHandler

from app.settings.app_settings import Settings

class LudoLogger:
    """
    Configuración del sistema de logs: archivo rotativo más consola.
    """
    # 5MB por archivo, hasta 5 backups
    MAX_BYTES: int = 5 * 1024 * 1024
    BACKUP_COUNT: int = 5
    FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    # Librerías que registran cada petición HTTP o cada ejecución de job en INFO
    NOISY_LOGGERS = ("httpx", "httpcore", "b2sdk", "apscheduler")

    @staticmethod
    def setup_logging(settings: Settings, level: Optional[str] = None) -> None:
        """
        Configura el logging raíz de la aplicación.

        Args:
            settings (Settings): Configuración (ruta de logs y nombre de la app).
            level (Optional[str]): Nivel, por ejemplo "DEBUG". Por defecto INFO.
        """
        settings.LOGS_PATH.mkdir(parents=True, exist_ok=True)

        rotate_handler = RotatingFileHandler(
            filename=settings.LOGS_PATH / f"{settings.APP_NAME}.log",
            mode="a",
            maxBytes=LudoLogger.MAX_BYTES,
            backupCount=LudoLogger.BACKUP_COUNT,
            encoding="utf-8"
        )

        logging.basicConfig(
            level=logging.getLevelNamesMapping().get((level or "INFO").upper(), logging.INFO),
            format=LudoLogger.FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[rotate_handler, logging.StreamHandler()]
        )

        for name in LudoLogger.NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

import sys
from pathlib import Path
from typing import List, Optional
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.settings.version import __version__


class Settings(BaseSettings):
    # Datos base
    APP_NAME: str = "LudoAlbums"
    APP_VERSION: str = __version__
    ENVIRONMENT: str = "development"

    # Directorios
    BASE_PATH: Path = Path.home() / f".{APP_NAME}"
    DATA_PATH: Path = BASE_PATH / "data"
    LOGS_PATH: Path = DATA_PATH / "logs"
    STORAGE_PATH: Path = DATA_PATH / "storage"

    # API
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    API_RELOAD: bool = False
    API_LOG_LEVEL: str = "info"
    CORS_ORIGINS: List[str] = []

    # Sesión
    SESSION_SECRET: str
    SESSION_COOKIE_NAME: str = "ludo_session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 30
    ALGORITHM: str = "HS256"

    # Credenciales (hash bcrypt o, si se permite, texto plano)
    ADMIN_PASSWORD: Optional[str] = None
    VIEWER_PASSWORD: Optional[str] = None
    ALLOW_PLAINTEXT_PASSWORDS: bool = False

    # CSRF
    CSRF_COOKIE_NAME: str = "csrf_token"
    CSRF_HEADER_NAME: str = "x-csrf-token"
    CSRF_MAX_AGE_SECONDS: int = 60 * 60

    # Almacenamiento: auto | local | b2 | vercel_blob
    STORAGE_BACKEND: str = "auto"
    B2_APPLICATION_KEY_ID: Optional[str] = None
    B2_APPLICATION_KEY: Optional[str] = None
    B2_BUCKET_NAME: Optional[str] = None
    B2_UPLOAD_ATTEMPTS: int = 3
    B2_RETRY_BASE_DELAY: float = 0.5
    BLOB_READ_WRITE_TOKEN: Optional[str] = None
    BLOB_API_URL: str = "https://blob.vercel-storage.com"

    # Subidas
    MAX_UPLOAD_BYTES: int = 15 * 1024 * 1024
    MAX_FILES_PER_UPLOAD: int = 20

    # Rate limiting
    LOGIN_MAX_ATTEMPTS: int = 5
    LOGIN_WINDOW_SECONDS: int = 5 * 60
    UPLOAD_RATE_LIMIT: int = 20
    ALBUM_RATE_LIMIT: int = 50
    RATE_LIMIT_WINDOW_SECONDS: int = 60 * 60
    STORE_SWEEP_INTERVAL_SECONDS: int = 5 * 60

    # Cola de limpieza de blobs
    CLEANUP_QUEUE_SIZE: int = 500
    CLEANUP_MAX_ATTEMPTS: int = 3
    CLEANUP_RETRY_DELAY: float = 1.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("SESSION_SECRET")
    @classmethod
    def _check_session_secret(cls, value: str) -> str:
        if len(value) < 32:
            raise ValueError("SESSION_SECRET must be at least 32 characters long")
        return value

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def _check_storage_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("auto", "local", "b2", "vercel_blob"):
            raise ValueError("STORAGE_BACKEND must be one of: auto, local, b2, vercel_blob")
        return value

    @property
    def IS_PRODUCTION(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def COOKIE_SECURE(self) -> bool:
        return self.IS_PRODUCTION

    @property
    def B2_CONFIGURED(self) -> bool:
        return bool(self.B2_APPLICATION_KEY_ID and self.B2_APPLICATION_KEY and self.B2_BUCKET_NAME)

    @property
    def VERCEL_BLOB_CONFIGURED(self) -> bool:
        return bool(self.BLOB_READ_WRITE_TOKEN)

    @property
    def RESOLVED_STORAGE_BACKEND(self) -> str:
        """Backend efectivo: se decide una única vez a partir de la configuración presente."""
        if self.STORAGE_BACKEND != "auto":
            return self.STORAGE_BACKEND
        if self.B2_CONFIGURED:
            return "b2"
        if self.VERCEL_BLOB_CONFIGURED:
            return "vercel_blob"
        return "local"

    def ensure_dirs(self) -> None:
            """Crea la estructura de directorios necesaria para self-hosting."""
            dirs = [self.BASE_PATH, self.DATA_PATH, self.LOGS_PATH, self.STORAGE_PATH]
            for directory in dirs:
                try:
                    directory.mkdir(parents=True, exist_ok=True)
                except OSError:
                    print(f" ERROR CRÍTICO: No se pudo crear el directorio {directory}. revise permisos.")
                    sys.exit(1)

def load_settings() -> Settings:
    """
    Instancia la configuración capturando errores de validación para
    presentar mensajes amigables al usuario.
    """
    try:
        instance = Settings()
        instance.ensure_dirs()
        return instance
    except ValidationError as e:
        problems = [
            f"{err['loc'][0]}: {'missing' if err['type'] == 'missing' else err['msg']}"
            for err in e.errors()
        ]

        message = (
            "\n" + "="*60 + "\n"
            " ERROR DE CONFIGURACIÓN EN LUDO ALBUMS\n"
            "="*60 + "\n"
            "Hay variables de entorno obligatorias ausentes o inválidas:\n"
            + "".join(f"  - {problem}\n" for problem in problems) +
            "\nGenera un secreto con: openssl rand -base64 32\n"
            "y revisa el archivo '.env.example'.\n"
            "="*60
        )
        print(message)
        sys.exit(1)

settings = load_settings()

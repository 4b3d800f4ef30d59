"""
Validación de la configuración de seguridad al arranque y en el health check.
"""
import re
import logging
from typing import List
from dataclasses import dataclass, field

from app.settings.app_settings import Settings
from app.errors import ConfigError

logger = logging.getLogger("EnvValidation")

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
SPECIAL_CHARS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


@dataclass
class EnvValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def is_hashed_password(value: str) -> bool:
    return value.startswith(BCRYPT_PREFIXES)


def validate_password_strength(password: str, min_length: int = 12) -> List[str]:
    """
    Revisa la fortaleza de una contraseña en texto plano.

    Args:
        password (str): Contraseña a revisar.
        min_length (int): Longitud mínima exigida.

    Returns:
        List[str]: Problemas encontrados, vacía si es aceptable o si ya es un hash.
    """
    if is_hashed_password(password):
        return []

    problems = []
    if len(password) < min_length:
        problems.append(f"must be at least {min_length} characters long")
    if not re.search(r"[a-z]", password):
        problems.append("must contain a lowercase letter")
    if not re.search(r"[A-Z]", password):
        problems.append("must contain an uppercase letter")
    if not re.search(r"\d", password):
        problems.append("must contain a number")
    if not SPECIAL_CHARS.search(password):
        problems.append("must contain a special character")
    return problems


def validate_environment(settings: Settings) -> EnvValidationResult:
    """
    Valida las variables de entorno de seguridad y almacenamiento.

    Args:
        settings (Settings): Configuración cargada.

    Returns:
        EnvValidationResult: Errores (bloqueantes) y advertencias.
    """
    result = EnvValidationResult()

    if not settings.SESSION_SECRET or len(settings.SESSION_SECRET) < 32:
        result.errors.append("SESSION_SECRET must be at least 32 characters long")

    for name in ("ADMIN_PASSWORD", "VIEWER_PASSWORD"):
        value = getattr(settings, name)
        if not value:
            result.errors.append(f"{name} is not set")
            continue
        if is_hashed_password(value):
            continue
        if not settings.ALLOW_PLAINTEXT_PASSWORDS:
            result.errors.append(
                f"{name} is plain text; store a bcrypt hash or set ALLOW_PLAINTEXT_PASSWORDS=true"
            )
            continue
        weaknesses = validate_password_strength(value)
        if weaknesses:
            result.warnings.append(f"{name} is weak: {', '.join(weaknesses)}")
        if settings.IS_PRODUCTION:
            result.warnings.append(f"CRITICAL: using plain text {name} in production, hash it with bcrypt")

    if settings.STORAGE_BACKEND == "b2" and not settings.B2_CONFIGURED:
        result.errors.append(
            "STORAGE_BACKEND=b2 requires B2_APPLICATION_KEY_ID, B2_APPLICATION_KEY and B2_BUCKET_NAME"
        )
    if settings.STORAGE_BACKEND == "vercel_blob" and not settings.VERCEL_BLOB_CONFIGURED:
        result.errors.append("STORAGE_BACKEND=vercel_blob requires BLOB_READ_WRITE_TOKEN")
    if settings.BLOB_READ_WRITE_TOKEN and not settings.BLOB_READ_WRITE_TOKEN.startswith("vercel_blob_"):
        result.warnings.append("BLOB_READ_WRITE_TOKEN format looks incorrect")

    return result


def log_environment_validation(settings: Settings) -> EnvValidationResult:
    """
    Registra el resultado de la validación y aborta si hay errores.

    Raises:
        ConfigError: Si la configuración no es utilizable.
    """
    result = validate_environment(settings)

    for error in result.errors:
        logger.error(f"Environment error: {error}")
    for warning in result.warnings:
        logger.warning(f"Environment warning: {warning}")

    if not result.is_valid:
        raise ConfigError("Environment validation failed", errors=result.errors)

    if not result.warnings:
        logger.info("Environment variables validated successfully")
    return result

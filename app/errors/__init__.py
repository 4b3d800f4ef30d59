from app.errors.base import (
    LudoError,
    ValidationError,
    NotFoundError,
    AuthError,
    PermissionDeniedError,
    CsrfError,
    RateLimitError,
    StorageError
)
from app.errors.config_errors import ConfigError

from typing import List, Optional

from app.errors.base import LudoError

class ConfigError(LudoError):
    """Excepción lanzada cuando faltan variables de entorno o la configuración es inválida."""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message=message, details={"errors": errors or []})

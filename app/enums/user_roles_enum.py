from enum import StrEnum

class UserRole(StrEnum):
    """Roles de sesión: no hay cuentas, solo dos contraseñas compartidas."""
    ADMIN = "admin"
    VIEWER = "viewer"

    def __str__(self) -> str:
        return self.value

from datetime import datetime
from urllib.parse import quote
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

class Photo(BaseModel):
    """
    Registro de una foto dentro de la lista de un álbum.

    Args:
        id (str): UUID de la foto.
        album_id (str): Álbum propietario.
        url (str): Localizador resuelto por el backend.
        blob_path (str): Ruta interna del backend.
        created_at (datetime): Fecha de subida.
    """
    id: str
    album_id: str
    url: str
    blob_path: str
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PhotoResponse(Photo):
    """
    Foto para clientes: añade las URLs del proxy autenticado.
    """

    @computed_field(alias="secureUrl")
    @property
    def secure_url(self) -> str:
        """URL del proxy que exige sesión antes de servir el blob."""
        return f"/api/photos/secure?url={quote(self.url, safe='')}"

    @computed_field(alias="optimizedUrl")
    @property
    def optimized_url(self) -> str:
        """URL del proxy que redimensiona y convierte a WebP."""
        return f"/api/photos/optimized?url={quote(self.url, safe='')}"


class PhotoDelete(BaseModel):
    """
    Cuerpo de la petición de borrado de una foto.

    Args:
        photo_id (str): ID de la foto a eliminar.
    """
    photo_id: str = Field(..., min_length=1)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"photoId": "0d6b7f0e-3c0a-4d69-9f5e-2f1f1d2b9a77"}]}
    )

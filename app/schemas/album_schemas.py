from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.photos_schemas import PhotoResponse

CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Album(BaseModel):
    """
    Registro de un álbum tal como se persiste en el índice.

    Args:
        id (str): UUID del álbum.
        slug (str): Identificador legible y único, derivado del título.
        title (str): Título.
        subtitle (Optional[str]): Subtítulo.
        quote (Optional[str]): Cita que acompaña al álbum.
        date (Optional[str]): Fecha del álbum (ISO).
        cover_photo_url (Optional[str]): URL de la portada en el backend.
        cover_photo_blob_path (Optional[str]): Ruta interna de la portada.
        created_at (datetime): Fecha de creación.
    """
    id: str
    slug: str
    title: str
    subtitle: Optional[str] = None
    quote: Optional[str] = None
    date: Optional[str] = None
    cover_photo_url: Optional[str] = None
    cover_photo_blob_path: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "9f3c1a7e-5d2b-4c8e-a1f0-2b7d9e6c4a13",
                    "slug": "beach-day",
                    "title": "Beach Day",
                    "subtitle": "Verano",
                    "quote": "Sal y arena",
                    "date": "2026-07-14",
                    "createdAt": "2026-07-15T10:00:00+00:00"
                }
            ]
        }
    )


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AlbumCreate(BaseModel):
    """
    Modelo para crear un álbum.

    Args:
        title (str): Título (1-100 caracteres tras recortar espacios).
        subtitle (Optional[str]): Subtítulo (máximo 200).
        quote (Optional[str]): Cita (máximo 500).
        date (Optional[str]): Fecha libre en formato ISO.
    """
    title: str = Field(..., min_length=1, max_length=100)
    subtitle: Optional[str] = Field(None, max_length=200)
    quote: Optional[str] = Field(None, max_length=500)
    date: Optional[str] = None

    model_config = CAMEL_CONFIG

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("subtitle", "quote", "date", mode="before")
    @classmethod
    def _empty_is_none(cls, value):
        return _blank_to_none(value) if isinstance(value, str) else value


class AlbumUpdate(AlbumCreate):
    """
    Actualización parcial: solo title, subtitle, quote y date son editables.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=100)


class AlbumDetail(BaseModel):
    """
    Álbum con sus fotos, para la galería de visitantes.
    """
    album: Album
    photos: List[PhotoResponse]

    model_config = CAMEL_CONFIG


class AlbumSummary(Album):
    """Álbum del listado público con sus fotos servidas por el proxy."""
    photo_count: int = 0
    photos: List[PhotoResponse] = Field(default_factory=list)

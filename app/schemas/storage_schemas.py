from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class StoredBlob(BaseModel):
    """
    Resultado de subir un archivo al backend.

    Args:
        url (str): Localizador público o de proxy.
        blob_path (str): Ruta interna usada para borrar.
    """
    url: str
    blob_path: str

class BlobInfo(BaseModel):
    """
    Entrada de un listado de objetos del backend.
    """
    path: str
    url: str
    uploaded_at: datetime
    size: Optional[int] = None

class MetadataDocument(BaseModel):
    """
    Versión de un documento de metadatos (índice de álbumes o lista de fotos).

    Args:
        version (int): Contador monótono, uno más que la versión leída al escribir.
        saved_at (datetime): Momento de escritura.
        items (List[Dict[str, Any]]): Registros del documento.
    """
    version: int = 0
    saved_at: Optional[datetime] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class RateLimitResult(BaseModel):
    success: bool
    limit: int
    remaining: int
    reset_time: int

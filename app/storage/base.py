"""
Contrato común de los backends de almacenamiento de blobs.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from app.schemas import StoredBlob, BlobInfo

class StorageBackend(ABC):
    """
    Almacén de objetos binarios direccionados por ruta.

    Cada implementación decide su consistencia y latencia; el resto de la
    aplicación solo depende de este contrato.
    """
    name: str = "base"
    # Si True, los borrados tras eliminar metadatos se delegan a la cola de limpieza
    async_cleanup: bool = True

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: str) -> StoredBlob:
        """Guarda `data` en `path` y devuelve su URL y ruta interna."""

    @abstractmethod
    async def read_url(self, url: str) -> Optional[Tuple[bytes, str]]:
        """Devuelve (bytes, content_type) del objeto o None si no existe."""

    @abstractmethod
    async def list(self, prefix: str) -> List[BlobInfo]:
        """Lista los objetos cuya ruta empieza por `prefix`."""

    @abstractmethod
    async def delete(self, blob_path: str) -> None:
        """Elimina el objeto. Un objeto inexistente no es un error."""

    @abstractmethod
    def owns_url(self, url: str) -> bool:
        """Indica si `url` fue emitida por este backend."""

    async def aclose(self) -> None:
        return None

"""
Módulo de servicio del adaptador de almacenamiento.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from app.settings import Settings
from app.errors import LudoError, StorageError
from app.schemas import StoredBlob
from app.storage import (
    StorageBackend,
    LocalStorageBackend,
    B2StorageBackend,
    VercelBlobStorageBackend
)

logger = logging.getLogger("StorageService")

def create_backend(kind: str, settings: Settings) -> StorageBackend:
    """
    Construye un backend a partir de la configuración.

    Args:
        kind (str): "local", "b2" o "vercel_blob".
        settings (Settings): Configuración de la aplicación.

    Returns:
        StorageBackend: Backend listo para usar.
    """
    if kind == "b2":
        return B2StorageBackend(
            key_id=settings.B2_APPLICATION_KEY_ID,
            application_key=settings.B2_APPLICATION_KEY,
            bucket_name=settings.B2_BUCKET_NAME,
            upload_attempts=settings.B2_UPLOAD_ATTEMPTS,
            retry_base_delay=settings.B2_RETRY_BASE_DELAY,
        )
    if kind == "vercel_blob":
        return VercelBlobStorageBackend(token=settings.BLOB_READ_WRITE_TOKEN, api_url=settings.BLOB_API_URL)
    return LocalStorageBackend(root=settings.STORAGE_PATH)

class StorageService:
    """
    Contrato uniforme de subida y borrado sobre el backend seleccionado.

    El backend principal se elige una sola vez. Los backends heredados solo se
    usan para borrar o leer objetos cuyas URLs emitieron ellos.
    """

    def __init__(self, backend: StorageBackend, legacy_backends: Sequence[StorageBackend] = ()):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.backend = backend
        self.legacy_backends = list(legacy_backends)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageService":
        """
        Selecciona el backend según la configuración presente: B2 si hay
        credenciales, si no Vercel Blob, si no el sistema de archivos local.
        """
        kind = settings.RESOLVED_STORAGE_BACKEND
        backend = create_backend(kind, settings)

        legacy = []
        if kind != "vercel_blob" and settings.VERCEL_BLOB_CONFIGURED:
            legacy.append(create_backend("vercel_blob", settings))

        logger.info(f"Backend de almacenamiento seleccionado: {kind}")
        return cls(backend, legacy)

    @property
    def backends(self) -> List[StorageBackend]:
        return [self.backend, *self.legacy_backends]

    def resolve_backend(self, url: Optional[str]) -> StorageBackend:
        """
        Determina qué backend emitió una URL. Si es ambigua (vacía o de origen
        desconocido) se asume el backend principal.
        """
        if url:
            for backend in self.backends:
                if backend.owns_url(url):
                    return backend
        return self.backend

    def owns_url(self, url: str) -> bool:
        return any(backend.owns_url(url) for backend in self.backends)

    def needs_background_cleanup(self, url: Optional[str]) -> bool:
        return self.resolve_backend(url).async_cleanup

    # SUBIDA
    async def upload(self, data: bytes, path: str, content_type: str) -> StoredBlob:
        """
        Sube un archivo al backend principal.

        Args:
            data (bytes): Contenido.
            path (str): Ruta de destino.
            content_type (str): Tipo MIME.

        Returns:
            StoredBlob: URL y ruta interna del objeto.

        Raises:
            StorageError: Si el backend no pudo guardarlo (tras sus reintentos).
        """
        try:
            blob = await self.backend.put(path, data, content_type)
        except StorageError as e:
            self.logger.error(f"Upload failed for {path} on {self.backend.name}: {e.message}")
            raise
        self.logger.info(f"Uploaded {path} to {self.backend.name}")
        return blob

    # LECTURA
    async def read(self, url: str) -> Optional[Tuple[bytes, str]]:
        """
        Lee un objeto por su URL, solo si pertenece a un backend configurado.

        Returns:
            Optional[Tuple[bytes, str]]: (contenido, content_type) o None.
        """
        if not self.owns_url(url):
            return None
        return await self.resolve_backend(url).read_url(url)

    # ELIMINACIÓN
    async def delete(self, url: Optional[str], blob_path: str) -> bool:
        """
        Elimina un objeto. Los fallos se registran y no se propagan: el índice
        de metadatos es la fuente de verdad.

        Args:
            url (Optional[str]): URL almacenada (decide el backend).
            blob_path (str): Ruta interna del objeto.

        Returns:
            bool: True si el backend confirmó el borrado.
        """
        backend = self.resolve_backend(url)
        try:
            await backend.delete(blob_path)
            return True
        except LudoError as e:
            self.logger.error(f"Failed to delete {blob_path} from {backend.name}: {e.message}")
        except Exception as e:
            self.logger.error(f"Unexpected error deleting {blob_path} from {backend.name}: {e}")
        return False

    async def aclose(self) -> None:
        for backend in self.backends:
            await backend.aclose()

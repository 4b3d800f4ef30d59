"""
Backend de almacenamiento en el sistema de archivos local.
"""
import asyncio
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.enums import ImageMimeType
from app.errors import StorageError
from app.schemas import StoredBlob, BlobInfo
from app.storage.base import StorageBackend

class LocalStorageBackend(StorageBackend):
    """
    Guarda los objetos bajo un directorio raíz. Las URLs emitidas tienen la
    forma `/storage/<ruta>` y solo se sirven a través del proxy autenticado.
    """
    name = "local"
    async_cleanup = False
    URL_PREFIX = "/storage/"

    def __init__(self, root: Path) -> None:
        super().__init__()
        self.root = Path(root)
        self._ensure_root()

    def _ensure_root(self) -> None:
        """Garantiza que el directorio raíz exista."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.critical(f"Error fatal: No se pudo crear el directorio de almacenamiento: {e}")
            raise

    def _resolve(self, blob_path: str) -> Path:
        """
        Traduce una ruta lógica a una ruta física dentro de la raíz.

        Raises:
            StorageError: Si la ruta intenta salir del directorio raíz.
        """
        root = self.root.resolve()
        target = (root / blob_path.lstrip("/")).resolve()
        if target != root and root not in target.parents:
            raise StorageError("Ruta de almacenamiento inválida", details={"path": blob_path})
        return target

    def _url_for(self, blob_path: str) -> str:
        return f"{self.URL_PREFIX}{blob_path.lstrip('/')}"

    @staticmethod
    def _content_type(path: Path) -> str:
        if path.suffix.lower() == ".json":
            return "application/json"
        mime = ImageMimeType.get_extensions_map().get(path.suffix.lower(), ImageMimeType.JPEG)
        return mime.value

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as buffer:
            buffer.write(data)

    async def put(self, path: str, data: bytes, content_type: str) -> StoredBlob:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as e:
            self.logger.error(f"Error escribiendo {target}: {e}")
            raise StorageError("No se pudo guardar el archivo", details={"path": path}) from e

        self.logger.info(f"Archivo persistido físicamente: {path}")
        return StoredBlob(url=self._url_for(path), blob_path=path)

    async def read_url(self, url: str) -> Optional[Tuple[bytes, str]]:
        if not self.owns_url(url):
            return None
        target = self._resolve(url[len(self.URL_PREFIX):])
        try:
            data = await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError("No se pudo leer el archivo", details={"url": url}) from e
        return data, self._content_type(target)

    def _scan(self, prefix: str) -> List[BlobInfo]:
        root = self.root.resolve()
        base = self._resolve(prefix)
        search_dir = base if base.is_dir() else base.parent
        if not search_dir.exists():
            return []

        results = []
        for file_path in search_dir.rglob("*"):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(root).as_posix()
            if not relative.startswith(prefix.lstrip("/")):
                continue
            stat = file_path.stat()
            results.append(BlobInfo(
                path=relative,
                url=self._url_for(relative),
                uploaded_at=datetime.fromtimestamp(stat.st_mtime_ns / 1e9, tz=timezone.utc),
                size=stat.st_size
            ))
        return results

    async def list(self, prefix: str) -> List[BlobInfo]:
        return await asyncio.to_thread(self._scan, prefix)

    async def delete(self, blob_path: str) -> None:
        target = self._resolve(blob_path)
        try:
            await asyncio.to_thread(target.unlink)
            self.logger.info(f"Archivo eliminado: {blob_path}")
        except FileNotFoundError:
            self.logger.warning(f"El archivo {blob_path} ya no existía")
        except OSError as e:
            raise StorageError("No se pudo eliminar el archivo", details={"path": blob_path}) from e

    def owns_url(self, url: str) -> bool:
        if not url.startswith(self.URL_PREFIX):
            return False
        # Una URL emitida nunca contiene segmentos '..'
        return ".." not in url[len(self.URL_PREFIX):].split("/")

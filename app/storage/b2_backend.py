"""
Backend de almacenamiento sobre Backblaze B2.
"""
import asyncio
import threading
from io import BytesIO
from urllib.parse import urlparse, unquote
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from b2sdk.v2 import B2Api, InMemoryAccountInfo
from b2sdk.v2.exception import B2Error, FileNotPresent

from app.errors import StorageError
from app.schemas import StoredBlob, BlobInfo
from app.storage.base import StorageBackend

class B2StorageBackend(StorageBackend):
    """
    Sube, lista y borra objetos en un bucket de B2 usando b2sdk.

    b2sdk es síncrono, así que cada llamada se ejecuta en un hilo. Solo las
    subidas se reintentan aquí (con espera exponencial); el resto falla rápido.
    """
    name = "b2"
    async_cleanup = True

    def __init__(
            self,
            key_id: str,
            application_key: str,
            bucket_name: str,
            upload_attempts: int = 3,
            retry_base_delay: float = 0.5
        ) -> None:
        super().__init__()
        self.key_id = key_id
        self.application_key = application_key
        self.bucket_name = bucket_name
        self.upload_attempts = max(1, upload_attempts)
        self.retry_base_delay = retry_base_delay

        self.b2_api = B2Api(InMemoryAccountInfo())
        self._bucket = None
        self._lock = threading.Lock()

    def _get_bucket(self):
        """Autoriza la cuenta y resuelve el bucket una sola vez; b2sdk renueva el token."""
        with self._lock:
            if self._bucket is None:
                self.b2_api.authorize_account("production", self.key_id, self.application_key)
                self._bucket = self.b2_api.get_bucket_by_name(self.bucket_name)
                self.logger.info(f"Autorizado en B2, bucket: {self.bucket_name}")
            return self._bucket

    def _download_base(self) -> str:
        self._get_bucket()
        return self.b2_api.account_info.get_download_url()

    def _url_for(self, blob_path: str) -> str:
        return f"{self._download_base()}/file/{self.bucket_name}/{blob_path}"

    def _path_from_url(self, url: str) -> Optional[str]:
        marker = f"/file/{self.bucket_name}/"
        path = urlparse(url).path
        if not path.startswith(marker):
            return None
        return unquote(path[len(marker):])

    # =========== OPERACIONES SÍNCRONAS (hilos) ===========
    def _upload(self, path: str, data: bytes, content_type: str) -> StoredBlob:
        bucket = self._get_bucket()
        bucket.upload_bytes(data, path, content_type=content_type)
        return StoredBlob(url=self._url_for(path), blob_path=path)

    def _download(self, path: str) -> Optional[Tuple[bytes, str]]:
        bucket = self._get_bucket()
        try:
            downloaded = bucket.download_file_by_name(path)
        except FileNotPresent:
            return None
        buffer = BytesIO()
        downloaded.save(buffer)
        content_type = downloaded.download_version.content_type or "application/octet-stream"
        return buffer.getvalue(), content_type

    def _ls(self, prefix: str) -> List[BlobInfo]:
        bucket = self._get_bucket()
        folder = prefix.rstrip("/")
        results = []
        for file_version, _ in bucket.ls(folder, latest_only=True, recursive=True):
            if not file_version.file_name.startswith(prefix):
                continue
            results.append(BlobInfo(
                path=file_version.file_name,
                url=self._url_for(file_version.file_name),
                uploaded_at=datetime.fromtimestamp(file_version.upload_timestamp / 1000, tz=timezone.utc),
                size=file_version.size
            ))
        return results

    def _delete(self, path: str) -> None:
        bucket = self._get_bucket()
        try:
            file_version = bucket.get_file_info_by_name(path)
        except FileNotPresent:
            self.logger.warning(f"El archivo {path} ya no existía en B2")
            return
        bucket.delete_file_version(file_version.id_, file_version.file_name)
        self.logger.info(f"Archivo eliminado de B2: {path}")

    # =========== CONTRATO ASÍNCRONO ===========
    async def put(self, path: str, data: bytes, content_type: str) -> StoredBlob:
        for attempt in range(1, self.upload_attempts + 1):
            try:
                return await asyncio.to_thread(self._upload, path, data, content_type)
            except B2Error as e:
                retries_left = self.upload_attempts - attempt
                self.logger.warning(
                    f"Upload attempt {attempt} failed for {path}. {retries_left} retries left. {e}"
                )
                if retries_left == 0:
                    raise StorageError(
                        "No se pudo subir el archivo a B2",
                        details={"path": path, "attempts": attempt}
                    ) from e
                await asyncio.sleep(self.retry_base_delay * (2 ** (attempt - 1)))

    async def read_url(self, url: str) -> Optional[Tuple[bytes, str]]:
        path = self._path_from_url(url)
        if path is None:
            return None
        try:
            return await asyncio.to_thread(self._download, path)
        except B2Error as e:
            raise StorageError("No se pudo descargar el archivo de B2", details={"url": url}) from e

    async def list(self, prefix: str) -> List[BlobInfo]:
        try:
            return await asyncio.to_thread(self._ls, prefix)
        except B2Error as e:
            raise StorageError("No se pudo listar el bucket de B2", details={"prefix": prefix}) from e

    async def delete(self, blob_path: str) -> None:
        try:
            await asyncio.to_thread(self._delete, blob_path)
        except B2Error as e:
            raise StorageError("No se pudo eliminar el archivo de B2", details={"path": blob_path}) from e

    def owns_url(self, url: str) -> bool:
        parsed = urlparse(url)
        host = parsed.hostname or ""
        return host.endswith("backblazeb2.com") and self._path_from_url(url) is not None

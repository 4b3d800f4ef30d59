"""
Backend de almacenamiento sobre la API REST de Vercel Blob.
"""
from datetime import datetime, timezone
from urllib.parse import urlparse
from typing import List, Optional, Tuple

import httpx

from app.errors import StorageError
from app.schemas import StoredBlob, BlobInfo
from app.storage.base import StorageBackend

VERCEL_BLOB_HOST_SUFFIX = "blob.vercel-storage.com"

def is_vercel_blob_url(url: str) -> bool:
    """Las URLs públicas tienen la forma https://<store>.public.blob.vercel-storage.com/<ruta>."""
    host = urlparse(url).hostname or ""
    return host.endswith(VERCEL_BLOB_HOST_SUFFIX)

class VercelBlobStorageBackend(StorageBackend):
    """
    Objetos públicos en Vercel Blob. Sin reintentos: falla rápido.

    Los blobs se identifican por su URL, por eso `blob_path` es la propia URL.
    """
    name = "vercel_blob"
    async_cleanup = True
    API_VERSION = "7"

    def __init__(
            self,
            token: str,
            api_url: str = "https://blob.vercel-storage.com",
            timeout: float = 30.0,
            transport: Optional[httpx.AsyncBaseTransport] = None
        ) -> None:
        super().__init__()
        self.api_url = api_url.rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"authorization": f"Bearer {token}", "x-api-version": self.API_VERSION},
        )

    async def put(self, path: str, data: bytes, content_type: str) -> StoredBlob:
        try:
            response = await self.client.put(
                f"{self.api_url}/",
                params={"pathname": path},
                content=data,
                headers={
                    "x-content-type": content_type,
                    "x-add-random-suffix": "0",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.error(f"Error subiendo {path} a Vercel Blob: {e}")
            raise StorageError("No se pudo subir el archivo a Vercel Blob", details={"path": path}) from e

        url = response.json()["url"]
        return StoredBlob(url=url, blob_path=url)

    async def read_url(self, url: str) -> Optional[Tuple[bytes, str]]:
        try:
            response = await self.client.get(url, headers={"cache-control": "no-store"})
        except httpx.HTTPError as e:
            raise StorageError("No se pudo descargar el blob", details={"url": url}) from e
        if response.status_code == 404:
            return None
        if response.is_error:
            self.logger.error(f"Failed to fetch blob: {response.status_code}")
            return None
        return response.content, response.headers.get("content-type", "image/jpeg")

    async def list(self, prefix: str) -> List[BlobInfo]:
        results: List[BlobInfo] = []
        cursor = None
        while True:
            params = {"prefix": prefix, "limit": "1000"}
            if cursor:
                params["cursor"] = cursor
            try:
                response = await self.client.get(self.api_url, params=params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise StorageError("No se pudo listar Vercel Blob", details={"prefix": prefix}) from e

            payload = response.json()
            for blob in payload.get("blobs", []):
                uploaded_at = datetime.fromisoformat(blob["uploadedAt"])
                if uploaded_at.tzinfo is None:
                    uploaded_at = uploaded_at.replace(tzinfo=timezone.utc)
                results.append(BlobInfo(
                    path=blob["pathname"],
                    url=blob["url"],
                    uploaded_at=uploaded_at,
                    size=blob.get("size")
                ))

            cursor = payload.get("cursor")
            if not payload.get("hasMore") or not cursor:
                return results

    async def delete(self, blob_path: str) -> None:
        try:
            response = await self.client.post(f"{self.api_url}/delete", json={"urls": [blob_path]})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageError("No se pudo eliminar el blob", details={"url": blob_path}) from e
        self.logger.info(f"Blob eliminado: {blob_path}")

    def owns_url(self, url: str) -> bool:
        return is_vercel_blob_url(url)

    async def aclose(self) -> None:
        await self.client.aclose()

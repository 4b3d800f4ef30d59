import asyncio

import httpx

from conftest import MemoryBackend
from app.services import StorageService
from app.storage import LocalStorageBackend, VercelBlobStorageBackend

VERCEL_URL = "https://store.public.blob.vercel-storage.com/albums/a1/p1.jpg"


def _vercel(calls):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json={})
    return VercelBlobStorageBackend(token="vercel_blob_rw_x", transport=httpx.MockTransport(handler))


def test_from_settings_selects_local_without_credentials(test_settings):
    service = StorageService.from_settings(test_settings.model_copy(update={"STORAGE_BACKEND": "auto"}))
    assert isinstance(service.backend, LocalStorageBackend)
    assert service.legacy_backends == []

def test_from_settings_keeps_vercel_for_legacy_urls(test_settings):
    service = StorageService.from_settings(
        test_settings.model_copy(update={"STORAGE_BACKEND": "local", "BLOB_READ_WRITE_TOKEN": "vercel_blob_rw_x"})
    )
    assert isinstance(service.backend, LocalStorageBackend)
    assert isinstance(service.resolve_backend(VERCEL_URL), VercelBlobStorageBackend)
    asyncio.run(service.aclose())

def test_auto_prefers_vercel_when_only_token_present(test_settings):
    service = StorageService.from_settings(
        test_settings.model_copy(update={"STORAGE_BACKEND": "auto", "BLOB_READ_WRITE_TOKEN": "vercel_blob_rw_x"})
    )
    assert service.backend.name == "vercel_blob"
    asyncio.run(service.aclose())

def test_delete_routes_by_url_host(local_backend):
    calls = []
    service = StorageService(local_backend, legacy_backends=[_vercel(calls)])

    assert asyncio.run(service.delete(VERCEL_URL, VERCEL_URL)) is True
    assert calls == ["/delete"]

    # URL vacía o desconocida: backend principal
    assert service.resolve_backend("") is local_backend
    assert service.resolve_backend("https://example.com/x.jpg") is local_backend

def test_delete_failures_are_swallowed_and_reported():
    backend = MemoryBackend(fail_deletes=True)
    service = StorageService(backend)
    assert asyncio.run(service.delete("memory://blobs/albums/a/p.jpg", "albums/a/p.jpg")) is False
    assert backend.delete_attempts == 1

def test_upload_returns_stored_blob(memory_backend, jpeg_bytes):
    service = StorageService(memory_backend)
    blob = asyncio.run(service.upload(jpeg_bytes, "albums/a1/p1-x.jpg", "image/jpeg"))
    assert blob.url == "memory://blobs/albums/a1/p1-x.jpg"
    assert memory_backend.image_paths() == ["albums/a1/p1-x.jpg"]

def test_read_refuses_foreign_urls(memory_backend, jpeg_bytes):
    service = StorageService(memory_backend)
    blob = asyncio.run(service.upload(jpeg_bytes, "albums/a1/p1-x.jpg", "image/jpeg"))
    assert asyncio.run(service.read(blob.url)) == (jpeg_bytes, "image/jpeg")
    assert asyncio.run(service.read("https://evil.example.com/a.jpg")) is None

def test_background_cleanup_only_for_blob_backends(local_backend, memory_backend):
    assert StorageService(local_backend).needs_background_cleanup("/storage/a.jpg") is False
    assert StorageService(memory_backend).needs_background_cleanup("memory://blobs/a.jpg") is True

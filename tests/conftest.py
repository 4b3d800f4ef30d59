import io
import os
import tempfile
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest
from PIL import Image
from passlib.context import CryptContext

# La configuración se carga al importar `app`, así que el entorno va primero
_TEST_HOME = tempfile.mkdtemp(prefix="ludo-tests-")
_fast_bcrypt = CryptContext(schemes=["bcrypt"], bcrypt__rounds=4)

ADMIN_PASSWORD = "Admin-Pass-2026!"
VIEWER_PASSWORD = "Viewer-Pass-2026!"

os.environ.update({
    "SESSION_SECRET": "test-secret-0123456789-abcdefghijklmnop",
    "ADMIN_PASSWORD": _fast_bcrypt.hash(ADMIN_PASSWORD),
    "VIEWER_PASSWORD": _fast_bcrypt.hash(VIEWER_PASSWORD),
    "ALLOW_PLAINTEXT_PASSWORDS": "false",
    "ENVIRONMENT": "development",
    "STORAGE_BACKEND": "local",
    "BASE_PATH": _TEST_HOME,
    "DATA_PATH": os.path.join(_TEST_HOME, "data"),
    "LOGS_PATH": os.path.join(_TEST_HOME, "data", "logs"),
    "STORAGE_PATH": os.path.join(_TEST_HOME, "data", "storage"),
})
for _name in ("B2_APPLICATION_KEY_ID", "B2_APPLICATION_KEY", "B2_BUCKET_NAME", "BLOB_READ_WRITE_TOKEN"):
    os.environ.pop(_name, None)

from fastapi.testclient import TestClient

from app.settings import settings
from app.errors import StorageError
from app.schemas import StoredBlob, BlobInfo
from app.storage import StorageBackend, LocalStorageBackend
from app.services import StorageService
from app.api import create_app, register_error_handlers


class MemoryBackend(StorageBackend):
    """Backend en memoria con URLs memory://; registra cada llamada."""
    name = "memory"
    async_cleanup = True
    URL_PREFIX = "memory://blobs/"

    def __init__(self, fail_upload_on: Optional[int] = None, fail_deletes: bool = False):
        super().__init__()
        self.objects: Dict[str, Tuple[bytes, str, datetime]] = {}
        self.fail_upload_on = fail_upload_on
        self.fail_deletes = fail_deletes
        self.image_puts = 0
        self.put_paths: List[str] = []
        self.deleted: List[str] = []
        self.delete_attempts = 0

    async def put(self, path: str, data: bytes, content_type: str) -> StoredBlob:
        if not path.startswith("metadata/"):
            self.image_puts += 1
            if self.fail_upload_on is not None and self.image_puts == self.fail_upload_on:
                raise StorageError("simulated upload failure", details={"path": path})
        self.put_paths.append(path)
        self.objects[path] = (data, content_type, datetime.now(timezone.utc))
        return StoredBlob(url=self.URL_PREFIX + path, blob_path=path)

    async def read_url(self, url: str):
        if not self.owns_url(url):
            return None
        entry = self.objects.get(url[len(self.URL_PREFIX):])
        if entry is None:
            return None
        return entry[0], entry[1]

    async def list(self, prefix: str) -> List[BlobInfo]:
        return [
            BlobInfo(path=path, url=self.URL_PREFIX + path, uploaded_at=entry[2], size=len(entry[0]))
            for path, entry in self.objects.items()
            if path.startswith(prefix)
        ]

    async def delete(self, blob_path: str) -> None:
        self.delete_attempts += 1
        if self.fail_deletes:
            raise StorageError("simulated delete failure", details={"path": blob_path})
        self.objects.pop(blob_path, None)
        self.deleted.append(blob_path)

    def owns_url(self, url: str) -> bool:
        return url.startswith(self.URL_PREFIX)

    def image_paths(self) -> List[str]:
        return [path for path in self.objects if path.startswith("albums/")]


def make_image(fmt: str = "JPEG", size=(64, 48), color=(200, 120, 40)) -> bytes:
    """Imagen real generada con Pillow."""
    buffer = io.BytesIO()
    mode = "RGBA" if fmt == "PNG" else "RGB"
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG")

@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG")

@pytest.fixture
def memory_backend() -> MemoryBackend:
    return MemoryBackend()

@pytest.fixture
def local_backend(tmp_path) -> LocalStorageBackend:
    return LocalStorageBackend(tmp_path / "storage")

@pytest.fixture
def test_settings(tmp_path):
    """Configuración aislada por test (almacenamiento en un directorio temporal)."""
    return settings.model_copy(update={"STORAGE_PATH": tmp_path / "storage"})

@pytest.fixture
def build_client(test_settings):
    """Fábrica de TestClient con el lifespan activo; acepta un StorageService propio."""
    clients = []

    def _build(storage: Optional[StorageService] = None, **overrides) -> TestClient:
        app_settings = test_settings.model_copy(update=overrides)
        app = create_app(app_settings, storage=storage)
        register_error_handlers(app)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _build

    for client in clients:
        client.__exit__(None, None, None)

@pytest.fixture
def client(build_client) -> TestClient:
    return build_client()


def login_admin(client: TestClient) -> str:
    """Inicia sesión como admin y devuelve un token CSRF."""
    response = client.post("/api/auth/login", data={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    csrf = client.get("/api/admin/csrf")
    assert csrf.status_code == 200
    return csrf.json()["csrfToken"]

def login_viewer(client: TestClient) -> None:
    response = client.post("/api/auth/viewer", data={"password": VIEWER_PASSWORD})
    assert response.status_code == 200

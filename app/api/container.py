"""
Contenedor de servicios de la aplicación.
"""
from dataclasses import dataclass
from typing import Optional

from app.settings import Settings
from app.controllers import AlbumController, PhotoController
from app.database import MemoryStore, InMemoryStore
from app.services import (
    StorageService,
    BlobCleanupService,
    SecurityService,
    RateLimitService,
    CsrfService,
    AuthService,
    UploadValidator,
    ImageService,
    AlbumService,
    PhotoService
)

@dataclass
class ServiceContainer:
    """Instancias compartidas por todas las peticiones del proceso."""
    settings: Settings
    store: MemoryStore
    storage: StorageService
    cleanup: BlobCleanupService
    security: SecurityService
    rate_limiter: RateLimitService
    csrf: CsrfService
    auth: AuthService
    images: ImageService
    albums: AlbumService
    photos: PhotoService

    @classmethod
    def build(
            cls,
            settings: Settings,
            storage: Optional[StorageService] = None,
            store: Optional[MemoryStore] = None
        ) -> "ServiceContainer":
        """
        Construye el grafo de servicios.

        Args:
            settings (Settings): Configuración.
            storage (Optional[StorageService]): Adaptador ya construido; si no
                se indica se selecciona a partir de la configuración.
            store (Optional[MemoryStore]): Almacén efímero; por defecto en memoria.
        """
        store = store or InMemoryStore()
        storage = storage or StorageService.from_settings(settings)

        cleanup = BlobCleanupService(
            storage,
            maxsize=settings.CLEANUP_QUEUE_SIZE,
            max_attempts=settings.CLEANUP_MAX_ATTEMPTS,
            retry_delay=settings.CLEANUP_RETRY_DELAY,
        )
        security = SecurityService(settings, store)
        rate_limiter = RateLimitService.from_settings(settings, store)

        album_controller = AlbumController(storage.backend)
        photo_controller = PhotoController(storage.backend)
        validator = UploadValidator(settings.MAX_UPLOAD_BYTES, settings.MAX_FILES_PER_UPLOAD)

        return cls(
            settings=settings,
            store=store,
            storage=storage,
            cleanup=cleanup,
            security=security,
            rate_limiter=rate_limiter,
            csrf=CsrfService(settings, store),
            auth=AuthService(settings, security, rate_limiter),
            images=ImageService(),
            albums=AlbumService(album_controller, photo_controller, cleanup),
            photos=PhotoService(album_controller, photo_controller, storage, cleanup, validator),
        )

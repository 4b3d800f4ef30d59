"""
Módulo de servicio de fotos: subida con rollback y borrado.
"""
import logging
from uuid import uuid4
from typing import List

from app.controllers import AlbumController, PhotoController
from app.errors import NotFoundError, StorageError
from app.schemas import Photo, StoredBlob
from app.services.storage_service import StorageService
from app.services.cleanup_service import BlobCleanupService
from app.services.validation_service import UploadValidator, UploadedImage
from app.utils import get_now

# Límite de un nombre de archivo en la mayoría de sistemas de archivos
MAX_OBJECT_NAME = 255

class PhotoService:
    """
    Servicio de fotos de los álbumes.

    Una subida es todo o nada desde el punto de vista de los metadatos: si
    falla cualquier archivo o la escritura de la lista, se borran los blobs
    ya subidos y la lista queda como estaba.
    """
    def __init__(
            self,
            album_controller: AlbumController,
            photo_controller: PhotoController,
            storage_service: StorageService,
            cleanup: BlobCleanupService,
            validator: UploadValidator
        ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.album_controller = album_controller
        self.photo_controller = photo_controller
        self.storage_service = storage_service
        self.cleanup = cleanup
        self.validator = validator

    async def _require_album(self, album_id: str) -> None:
        if await self.album_controller.get_album_by_id(album_id) is None:
            raise NotFoundError("Album not found")

    async def _rollback(self, uploaded: List[StoredBlob]) -> None:
        for blob in uploaded:
            self.logger.warning(f"Rollback: eliminando {blob.blob_path}")
            if not await self.storage_service.delete(blob.url, blob.blob_path):
                self.logger.error(f"Rollback delete failed for {blob.blob_path}")

    async def upload_photos(self, album_id: str, uploads: List[UploadedImage]) -> List[Photo]:
        """
        Valida y sube un lote de imágenes y las añade al álbum.

        Args:
            album_id (str): ID del álbum.
            uploads (List[UploadedImage]): Archivos recibidos.

        Returns:
            List[Photo]: Fotos nuevas, en el orden recibido.

        Raises:
            NotFoundError: Si el álbum no existe.
            ValidationError: Si algún archivo no es aceptable (antes de subir nada).
            StorageError: Si falla la subida o el guardado; los blobs subidos se eliminan.
        """
        await self._require_album(album_id)
        content_types = self.validator.validate_files(uploads)

        uploaded: List[StoredBlob] = []
        new_photos: List[Photo] = []
        try:
            for upload, content_type in zip(uploads, content_types):
                photo_id = str(uuid4())
                safe_name = self.validator.sanitize_filename(
                    upload.filename, max_length=MAX_OBJECT_NAME - len(photo_id) - 1
                )
                path = f"albums/{album_id}/{photo_id}-{safe_name}"

                blob = await self.storage_service.upload(upload.data, path, content_type.value)
                uploaded.append(blob)
                new_photos.append(
                    Photo(
                        id=photo_id,
                        album_id=album_id,
                        url=blob.url,
                        blob_path=blob.blob_path,
                        created_at=get_now(),
                    )
                )

            existing = await self.photo_controller.get_photos_for_album(album_id)
            await self.photo_controller.save_photos_for_album(album_id, existing + new_photos)
        except Exception as e:
            self.logger.error(f"Upload to album {album_id} failed after {len(uploaded)} file(s): {e}")
            await self._rollback(uploaded)
            raise StorageError("Failed to upload photos. Please try again.") from e

        self.logger.info(f"Uploaded {len(new_photos)} photo(s) to album {album_id}")
        return new_photos

    async def delete_photo(self, album_id: str, photo_id: str) -> Photo:
        """
        Quita la foto de la lista del álbum y después borra su blob. Un fallo
        del backend se registra pero no revierte los metadatos.

        Raises:
            NotFoundError: Si el álbum o la foto no existen.
        """
        await self._require_album(album_id)

        photos = await self.photo_controller.get_photos_for_album(album_id)
        photo = next((p for p in photos if p.id == photo_id), None)
        if photo is None:
            raise NotFoundError("Photo not found")

        await self.photo_controller.save_photos_for_album(album_id, [p for p in photos if p.id != photo_id])
        self.logger.info(f"Photo {photo_id} removed from album {album_id}")

        await self.cleanup.discard(photo.url, photo.blob_path, label=f"photo {photo_id}")
        return photo

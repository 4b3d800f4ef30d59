"""
Módulo de servicio para la gestión de álbumes.
"""
import logging
from uuid import uuid4
from typing import List

from app.controllers import AlbumController, PhotoController
from app.errors import NotFoundError
from app.schemas import Album, AlbumCreate, AlbumUpdate, AlbumDetail, AlbumSummary, PhotoResponse
from app.services.cleanup_service import BlobCleanupService
from app.utils import get_now, unique_slug

class AlbumService:
    """
    Servicio de alto nivel para el ciclo de vida de los álbumes.
    """
    def __init__(
            self,
            album_controller: AlbumController,
            photo_controller: PhotoController,
            cleanup: BlobCleanupService
        ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.album_controller = album_controller
        self.photo_controller = photo_controller
        self.cleanup = cleanup

    # =========== CONSULTAS ===========
    async def list_albums(self) -> List[Album]:
        """Índice completo, tal como está guardado."""
        return await self.album_controller.get_albums()

    async def get_album(self, album_id: str) -> Album:
        """
        Obtiene un álbum por ID.

        Raises:
            NotFoundError: Si el álbum no existe.
        """
        album = await self.album_controller.get_album_by_id(album_id)
        if album is None:
            raise NotFoundError("Album not found")
        return album

    async def list_gallery(self) -> List[AlbumSummary]:
        """
        Álbumes para visitantes, del más reciente al más antiguo (por `date`
        y luego por fecha de creación), con las URLs del proxy de sus fotos.
        """
        albums = await self.album_controller.get_albums()
        albums.sort(key=lambda album: (album.date or "", album.created_at), reverse=True)

        summaries = []
        for album in albums:
            photos = await self.photo_controller.get_photos_for_album(album.id)
            summaries.append(
                AlbumSummary(
                    **album.model_dump(),
                    photo_count=len(photos),
                    photos=[PhotoResponse(**photo.model_dump()) for photo in photos],
                )
            )
        return summaries

    async def get_album_detail(self, slug: str) -> AlbumDetail:
        """
        Álbum y fotos por slug.

        Raises:
            NotFoundError: Si ningún álbum tiene ese slug.
        """
        album = await self.album_controller.get_album_by_slug(slug)
        if album is None:
            raise NotFoundError("Album not found")
        photos = await self.photo_controller.get_photos_for_album(album.id)
        return AlbumDetail(album=album, photos=[PhotoResponse(**photo.model_dump()) for photo in photos])

    # =========== CREAR / EDITAR ===========
    async def create_album(self, data: AlbumCreate) -> Album:
        """
        Crea un álbum con slug único derivado del título.

        Args:
            data (AlbumCreate): Datos validados.

        Returns:
            Album: El álbum creado.
        """
        albums = await self.album_controller.get_albums()
        album = Album(
            id=str(uuid4()),
            slug=unique_slug(data.title, (existing.slug for existing in albums)),
            title=data.title,
            subtitle=data.subtitle,
            quote=data.quote,
            date=data.date,
            created_at=get_now(),
        )
        albums.append(album)
        await self.album_controller.save_albums(albums)
        self.logger.info(f"Album created: {album.slug} ({album.id})")
        return album

    async def update_album(self, album_id: str, data: AlbumUpdate) -> Album:
        """
        Actualización parcial: solo se aplican los campos enviados. El slug no cambia.

        Raises:
            NotFoundError: Si el álbum no existe.
        """
        albums = await self.album_controller.get_albums()
        index = next((i for i, album in enumerate(albums) if album.id == album_id), None)
        if index is None:
            raise NotFoundError("Album not found")

        changes = data.model_dump(exclude_unset=True)
        if changes.get("title") is None:
            changes.pop("title", None)

        updated = albums[index].model_copy(update=changes)
        albums[index] = updated
        await self.album_controller.save_albums(albums)
        self.logger.info(f"Album updated: {updated.slug} ({', '.join(changes) or 'sin cambios'})")
        return updated

    # =========== ELIMINAR ===========
    async def delete_album(self, album_id: str) -> None:
        """
        Elimina el álbum del índice y vacía su lista de fotos. Los blobs de las
        fotos y de la portada se borran después, sin afectar a la respuesta.

        Raises:
            NotFoundError: Si el álbum no existe.
        """
        albums = await self.album_controller.get_albums()
        album = next((album for album in albums if album.id == album_id), None)
        if album is None:
            raise NotFoundError("Album not found")

        photos = await self.photo_controller.get_photos_for_album(album_id)

        await self.album_controller.save_albums([a for a in albums if a.id != album_id])
        await self.photo_controller.save_photos_for_album(album_id, [])
        self.logger.info(f"Album deleted: {album.slug} ({len(photos)} fotos)")

        for photo in photos:
            await self.cleanup.discard(photo.url, photo.blob_path, label=f"photo {photo.id}")
        if album.cover_photo_url and album.cover_photo_blob_path:
            await self.cleanup.discard(album.cover_photo_url, album.cover_photo_blob_path, label=f"cover {album.id}")

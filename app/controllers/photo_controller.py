"""
Controlador de las listas de fotos por álbum.
"""
from typing import List, Optional

from app.schemas import Photo
from app.controllers.base_controller import BaseController

class PhotoController(BaseController):
    """
    Persistencia de la lista de fotos de cada álbum (un documento por álbum).
    """

    @staticmethod
    def _prefix(album_id: str) -> str:
        return f"metadata/albums/{album_id}/photos"

    async def get_photos_for_album(self, album_id: str) -> List[Photo]:
        """
        Recupera las fotos de un álbum.

        Args:
            album_id (str): ID del álbum.

        Returns:
            List[Photo]: Fotos del álbum, vacía si nunca se guardó ninguna.
        """
        document = await self._load_document(self._prefix(album_id))
        return [Photo.model_validate(item) for item in document.items]

    async def save_photos_for_album(self, album_id: str, photos: List[Photo]) -> None:
        """
        Guarda la lista completa de fotos del álbum como una nueva versión.

        Args:
            album_id (str): ID del álbum.
            photos (List[Photo]): Lista completa de fotos.
        """
        items = [photo.model_dump(mode="json", by_alias=True) for photo in photos]
        await self._save_document(self._prefix(album_id), items)

    async def get_photo(self, album_id: str, photo_id: str) -> Optional[Photo]:
        photos = await self.get_photos_for_album(album_id)
        return next((photo for photo in photos if photo.id == photo_id), None)

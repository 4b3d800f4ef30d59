"""
Controlador del índice de álbumes.
"""
from typing import List, Optional

from app.schemas import Album
from app.controllers.base_controller import BaseController

class AlbumController(BaseController):
    """
    Persistencia del índice de álbumes (un único documento con todos ellos).
    """
    INDEX_PREFIX = "metadata/albums/index"

    async def get_albums(self) -> List[Album]:
        """
        Recupera todos los álbumes de la versión vigente del índice.

        Returns:
            List[Album]: Lista de álbumes.
        """
        document = await self._load_document(self.INDEX_PREFIX)
        albums = [Album.model_validate(item) for item in document.items]
        self.logger.debug(f"Loaded albums: {len(albums)}")
        return albums

    async def save_albums(self, albums: List[Album]) -> None:
        """
        Guarda el índice completo como una nueva versión.

        Args:
            albums (List[Album]): Lista completa de álbumes.
        """
        items = [album.model_dump(mode="json", by_alias=True) for album in albums]
        await self._save_document(self.INDEX_PREFIX, items)

    async def get_album_by_id(self, album_id: str) -> Optional[Album]:
        albums = await self.get_albums()
        return next((album for album in albums if album.id == album_id), None)

    async def get_album_by_slug(self, slug: str) -> Optional[Album]:
        albums = await self.get_albums()
        return next((album for album in albums if album.slug == slug), None)

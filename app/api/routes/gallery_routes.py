"""
Módulo de rutas de la galería (lectura, cualquier sesión).
"""
from typing import List
from fastapi import APIRouter, Depends

from app.schemas import AlbumSummary, AlbumDetail, SessionData
from app.services import AlbumService
from app.api.dependencies import get_current_session, get_albums_service

router = APIRouter(prefix="/albums", tags=["Gallery"])

@router.get("", response_model=List[AlbumSummary], response_model_by_alias=True)
async def list_gallery(
    session: SessionData = Depends(get_current_session),
    album_service: AlbumService = Depends(get_albums_service)
):
    """Álbumes del más reciente al más antiguo, con sus fotos."""
    return await album_service.list_gallery()

@router.get("/{slug}", response_model=AlbumDetail, response_model_by_alias=True)
async def get_album(
    slug: str,
    session: SessionData = Depends(get_current_session),
    album_service: AlbumService = Depends(get_albums_service)
):
    """Detalle de un álbum por slug."""
    return await album_service.get_album_detail(slug)

"""
Módulo de rutas de administración de álbumes.
"""
from typing import List
from fastapi import APIRouter, Depends, Response

from app.settings import Settings
from app.schemas import Album, AlbumCreate, AlbumUpdate, SessionData
from app.services import AlbumService, CsrfService
from app.api.cookies import set_csrf_cookie
from app.api.dependencies import (
    admin_mutation,
    get_current_admin,
    get_albums_service,
    get_csrf_service,
    get_settings_instance
)

router = APIRouter(prefix="/admin/albums", tags=["Admin Albums"])

def rotate_csrf(session: SessionData, response: Response, csrf_service: CsrfService, settings: Settings) -> str:
    """Emite un token nuevo tras una mutación correcta."""
    token = csrf_service.rotate(session)
    set_csrf_cookie(response, token, settings)
    return token

# --- OPERACIONES DE COLECCIÓN ---

@router.get("", response_model=List[Album], response_model_by_alias=True)
async def list_albums(
    session: SessionData = Depends(get_current_admin),
    album_service: AlbumService = Depends(get_albums_service)
):
    """Índice completo de álbumes."""
    return await album_service.list_albums()

@router.post("")
async def create_album(
    album_create: AlbumCreate,
    response: Response,
    session: SessionData = Depends(admin_mutation(rate_limit="album-ops")),
    album_service: AlbumService = Depends(get_albums_service),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Crea un álbum con slug único."""
    album = await album_service.create_album(album_create)
    token = rotate_csrf(session, response, csrf_service, settings)
    return {**album.model_dump(mode="json", by_alias=True), "csrfToken": token}

# --- OPERACIONES DE RECURSO INDIVIDUAL ---

@router.patch("/{album_id}")
async def update_album(
    album_id: str,
    album_update: AlbumUpdate,
    response: Response,
    session: SessionData = Depends(admin_mutation()),
    album_service: AlbumService = Depends(get_albums_service),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Actualiza título, subtítulo, cita o fecha."""
    album = await album_service.update_album(album_id, album_update)
    token = rotate_csrf(session, response, csrf_service, settings)
    return {**album.model_dump(mode="json", by_alias=True), "csrfToken": token}

@router.delete("/{album_id}")
async def delete_album(
    album_id: str,
    response: Response,
    session: SessionData = Depends(admin_mutation()),
    album_service: AlbumService = Depends(get_albums_service),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Elimina el álbum; sus fotos se borran del almacenamiento después."""
    await album_service.delete_album(album_id)
    token = rotate_csrf(session, response, csrf_service, settings)
    return {"ok": True, "csrfToken": token}

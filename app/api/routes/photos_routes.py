"""
Módulo de rutas para la gestión de fotografías y el proxy de imágenes.
"""
import asyncio
from typing import Optional, List
from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from fastapi.responses import PlainTextResponse

from app.errors import AuthError, LudoError, ValidationError
from app.settings import Settings
from app.schemas import PhotoDelete, PhotoResponse, SessionData
from app.services import CsrfService, ImageService, PhotoService, StorageService, UploadedImage
from app.api.errors import status_for
from app.api.routes.admin_albums_routes import rotate_csrf
from app.api.dependencies import (
    admin_mutation,
    get_csrf_service,
    get_image_service,
    get_optional_session,
    get_photos_service,
    get_settings_instance,
    get_storage_service
)

router = APIRouter(tags=["Photos"])

# --- ADMINISTRACIÓN ---

@router.post("/admin/albums/{album_id}/photos")
async def upload_photos(
    album_id: str,
    response: Response,
    photo: Optional[UploadFile] = File(None),
    photos: Optional[List[UploadFile]] = File(None),
    session: SessionData = Depends(admin_mutation(rate_limit="photo-upload")),
    photo_service: PhotoService = Depends(get_photos_service),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """
    Sube una o varias fotos (campos multipart `photo` y/o `photos`).

    Si falla cualquier archivo no se guarda ninguno.
    """
    files = ([photo] if photo is not None else []) + list(photos or [])
    uploads = [
        UploadedImage(
            filename=upload.filename or "photo",
            content_type=upload.content_type or "",
            data=await upload.read(),
        )
        for upload in files
    ]

    new_photos = await photo_service.upload_photos(album_id, uploads)
    token = rotate_csrf(session, response, csrf_service, settings)
    return {
        "photos": [PhotoResponse(**p.model_dump()).model_dump(mode="json", by_alias=True) for p in new_photos],
        "csrfToken": token,
    }

@router.delete("/admin/albums/{album_id}/photos")
async def delete_photo(
    album_id: str,
    body: PhotoDelete,
    response: Response,
    session: SessionData = Depends(admin_mutation()),
    photo_service: PhotoService = Depends(get_photos_service),
    csrf_service: CsrfService = Depends(get_csrf_service),
    settings: Settings = Depends(get_settings_instance)
):
    """Quita la foto del álbum y borra su archivo."""
    await photo_service.delete_photo(album_id, body.photo_id)
    token = rotate_csrf(session, response, csrf_service, settings)
    return {"ok": True, "csrfToken": token}

# --- PROXY AUTENTICADO ---

def _plain_error(exc: LudoError) -> PlainTextResponse:
    status_code = status_for(exc)
    message = exc.message if status_code < 500 else "Internal server error"
    return PlainTextResponse(message, status_code=status_code)

async def _fetch(session: Optional[SessionData], url: Optional[str], storage_service: StorageService):
    if session is None:
        raise AuthError("Unauthorized")
    if not url:
        raise ValidationError("Missing url parameter")
    if not storage_service.owns_url(url):
        raise ValidationError("Invalid url")
    return await storage_service.read(url)

@router.get("/photos/optimized")
async def optimized_photo(
    url: Optional[str] = None,
    w: Optional[str] = None,
    q: Optional[str] = None,
    session: Optional[SessionData] = Depends(get_optional_session),
    storage_service: StorageService = Depends(get_storage_service),
    image_service: ImageService = Depends(get_image_service)
):
    """Imagen redimensionada (sin ampliar) y convertida a WebP."""
    try:
        result = await _fetch(session, url, storage_service)
        if result is None:
            return PlainTextResponse("Not found", status_code=404)
        width, quality = image_service.parse_options(w, q)
        data = await asyncio.to_thread(image_service.optimize, result[0], width, quality)
    except LudoError as e:
        return _plain_error(e)

    return Response(
        content=data,
        media_type="image/webp",
        headers={
            "Cache-Control": "private, max-age=31536000, immutable",
            "X-Content-Type-Options": "nosniff",
        },
    )

@router.get("/photos/{path:path}")
async def proxy_photo(
    path: str,
    url: Optional[str] = None,
    session: Optional[SessionData] = Depends(get_optional_session),
    storage_service: StorageService = Depends(get_storage_service)
):
    """Sirve el blob original a cualquier sesión válida."""
    try:
        result = await _fetch(session, url, storage_service)
    except LudoError as e:
        return _plain_error(e)

    if result is None:
        return PlainTextResponse("Not found", status_code=404)

    data, content_type = result
    return Response(
        content=data,
        media_type=content_type,
        headers={
            "Cache-Control": "private, max-age=3600",
            "X-Content-Type-Options": "nosniff",
        },
    )

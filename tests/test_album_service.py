import asyncio

import pytest

from conftest import make_image
from test_photo_service import build_services
from app.errors import NotFoundError
from app.schemas import AlbumCreate, AlbumUpdate
from app.services import UploadedImage


def test_create_album_generates_unique_slugs(memory_backend):
    album_service, _, _, _ = build_services(memory_backend)

    async def scenario():
        return [await album_service.create_album(AlbumCreate(title="Beach Day")) for _ in range(3)]

    albums = asyncio.run(scenario())
    assert [a.slug for a in albums] == ["beach-day", "beach-day-1", "beach-day-2"]
    assert len({a.id for a in albums}) == 3

def test_album_input_normalisation():
    data = AlbumCreate(title="  Verano  ", subtitle="   ", quote="", date="2026-07-14")
    assert data.title == "Verano"
    assert data.subtitle is None
    assert data.quote is None
    with pytest.raises(ValueError):
        AlbumCreate(title="   ")
    with pytest.raises(ValueError):
        AlbumCreate(title="x" * 101)
    with pytest.raises(ValueError):
        AlbumCreate(title="ok", quote="q" * 501)

def test_update_is_partial_and_keeps_slug(memory_backend):
    album_service, _, _, _ = build_services(memory_backend)

    async def scenario():
        album = await album_service.create_album(AlbumCreate(title="Beach Day", subtitle="Verano"))
        updated = await album_service.update_album(album.id, AlbumUpdate.model_validate({"title": "Playa"}))
        stored = await album_service.get_album(album.id)
        return album, updated, stored

    album, updated, stored = asyncio.run(scenario())
    assert updated.title == "Playa"
    assert updated.subtitle == "Verano"
    assert updated.slug == album.slug == "beach-day"
    assert stored == updated

def test_update_can_clear_optional_fields(memory_backend):
    album_service, _, _, _ = build_services(memory_backend)

    async def scenario():
        album = await album_service.create_album(AlbumCreate(title="Con cita", quote="Hola"))
        return await album_service.update_album(album.id, AlbumUpdate.model_validate({"quote": ""}))

    assert asyncio.run(scenario()).quote is None

def test_update_missing_album_is_not_found(memory_backend):
    album_service, _, _, _ = build_services(memory_backend)
    with pytest.raises(NotFoundError):
        asyncio.run(album_service.update_album("nope", AlbumUpdate(title="x")))

def test_delete_album_clears_photos_and_schedules_blob_deletes(memory_backend):
    album_service, photo_service, photo_controller, cleanup = build_services(memory_backend)

    async def scenario():
        album = await album_service.create_album(AlbumCreate(title="Se va"))
        files = [UploadedImage(f"{i}.jpg", "image/jpeg", make_image("JPEG")) for i in range(2)]
        await photo_service.upload_photos(album.id, files)
        await album_service.delete_album(album.id)
        await cleanup.drain()
        await cleanup.stop()
        return album, await album_service.list_albums(), await photo_controller.get_photos_for_album(album.id)

    album, albums, photos = asyncio.run(scenario())
    assert albums == []
    assert photos == []
    assert memory_backend.image_paths() == []

def test_gallery_sorted_by_date_descending(memory_backend):
    album_service, _, _, _ = build_services(memory_backend)

    async def scenario():
        await album_service.create_album(AlbumCreate(title="Viejo", date="2024-01-01"))
        await album_service.create_album(AlbumCreate(title="Nuevo", date="2026-05-01"))
        await album_service.create_album(AlbumCreate(title="Medio", date="2025-03-10"))
        return await album_service.list_gallery()

    assert [a.slug for a in asyncio.run(scenario())] == ["nuevo", "medio", "viejo"]

def test_album_detail_by_slug(memory_backend):
    album_service, photo_service, _, _ = build_services(memory_backend)

    async def scenario():
        album = await album_service.create_album(AlbumCreate(title="Detalle"))
        await photo_service.upload_photos(album.id, [UploadedImage("a.png", "image/png", make_image("PNG"))])
        return await album_service.get_album_detail("detalle")

    detail = asyncio.run(scenario())
    assert detail.album.slug == "detalle"
    assert len(detail.photos) == 1
    dumped = detail.photos[0].model_dump(by_alias=True)
    assert dumped["secureUrl"].startswith("/api/photos/secure?url=memory%3A%2F%2Fblobs%2Falbums%2F")

def test_album_detail_missing_slug(memory_backend):
    album_service, _, _, _ = build_services(memory_backend)
    with pytest.raises(NotFoundError):
        asyncio.run(album_service.get_album_detail("nope"))

def test_beach_day_lifecycle(memory_backend):
    album_service, photo_service, photo_controller, cleanup = build_services(memory_backend)

    async def scenario():
        first = await album_service.create_album(AlbumCreate(title="Beach Day"))
        second = await album_service.create_album(AlbumCreate(title="Beach Day"))
        files = [UploadedImage(f"playa-{i}.jpg", "image/jpeg", make_image("JPEG")) for i in range(3)]
        await photo_service.upload_photos(second.id, files)
        uploaded = await photo_controller.get_photos_for_album(second.id)

        await album_service.delete_album(second.id)
        await cleanup.drain()
        await cleanup.stop()
        return first, second, uploaded, await album_service.list_albums(), await photo_controller.get_photos_for_album(second.id)

    first, second, uploaded, albums, remaining = asyncio.run(scenario())
    assert (first.slug, second.slug) == ("beach-day", "beach-day-1")
    assert len({p.id for p in uploaded}) == 3
    assert {p.album_id for p in uploaded} == {second.id}
    assert [a.id for a in albums] == [first.id]
    assert remaining == []

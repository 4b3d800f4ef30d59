from app.controllers.base_controller import BaseController
from app.controllers.album_controller import AlbumController
from app.controllers.photo_controller import PhotoController

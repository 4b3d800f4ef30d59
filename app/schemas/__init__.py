from app.schemas.auth_schemas import SessionData, CsrfTokenResponse
from app.schemas.photos_schemas import Photo, PhotoResponse, PhotoDelete
from app.schemas.storage_schemas import StoredBlob, BlobInfo, MetadataDocument, RateLimitResult
from app.schemas.album_schemas import Album, AlbumCreate, AlbumUpdate, AlbumDetail, AlbumSummary

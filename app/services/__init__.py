from app.services.storage_service import StorageService, create_backend
from app.services.cleanup_service import BlobCleanupService
from app.services.security_service import SecurityService
from app.services.rate_limit_service import RateLimitService, RateLimitPolicy
from app.services.csrf_service import CsrfService
from app.services.auth_service import AuthService
from app.services.validation_service import UploadValidator, UploadedImage
from app.services.image_service import ImageService
from app.services.albums_service import AlbumService
from app.services.photos_service import PhotoService

from app.storage.base import StorageBackend
from app.storage.local_backend import LocalStorageBackend
from app.storage.b2_backend import B2StorageBackend
from app.storage.vercel_blob_backend import VercelBlobStorageBackend, is_vercel_blob_url

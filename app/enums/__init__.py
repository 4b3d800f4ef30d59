from app.enums.user_roles_enum import UserRole
from app.enums.image_types_enum import ImageMimeType

from app.api.app_factory import create_app
from app.api.errors import register_error_handlers

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.csrf_routes import router as csrf_router
from app.api.routes.admin_albums_routes import router as admin_albums_router
from app.api.routes.gallery_routes import router as gallery_router
from app.api.routes.photos_routes import router as photos_router
from app.api.routes.check_routes import router as check_router

"""
FastAPI Application Factory module
"""
import logging
from typing import Optional
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from apscheduler.schedulers.background import BackgroundScheduler

from app.settings import Settings
from app.database import MemoryStore
from app.services import StorageService
from app.api.container import ServiceContainer
from app.api.include_routes import include_routes

logger = logging.getLogger("AppFactory")

def create_app(
        settings: Settings,
        storage: Optional[StorageService] = None,
        store: Optional[MemoryStore] = None
    ) -> FastAPI:
    """
    Crea y configura la aplicación FastAPI.

    Args:
        settings (Settings): Las configuraciones de la aplicación.
        storage (Optional[StorageService]): Adaptador de almacenamiento a usar
            en lugar del seleccionado por configuración.
        store (Optional[MemoryStore]): Almacén efímero a usar.

    Returns:
        FastAPI: Instancia de la aplicación FastAPI configurada.
    """
    services = ServiceContainer.build(settings, storage=storage, store=store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            services.store.sweep,
            "interval",
            seconds=settings.STORE_SWEEP_INTERVAL_SECONDS,
            id="memory_store_sweep",
        )
        scheduler.start()
        services.cleanup.start()
        logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} iniciado (almacenamiento: {services.storage.backend.name})")
        try:
            yield
        finally:
            await services.cleanup.stop()
            scheduler.shutdown(wait=False)
            await services.storage.aclose()
            logger.info(f"{settings.APP_NAME} detenido")

    app = FastAPI(
        title=settings.APP_NAME,
        description=f"{settings.APP_NAME} API",
        version=settings.APP_VERSION,
        docs_url=None if settings.IS_PRODUCTION else "/docs",
        redoc_url=None,
        openapi_url=None if settings.IS_PRODUCTION else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.services = services

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_methods=["GET", "POST", "PATCH", "DELETE"],
            allow_headers=[settings.CSRF_HEADER_NAME, "content-type"],
            allow_credentials=True,
        )

    # Inicializamos los routers de la API
    include_routes(app, prefix="/api")

    return app

# classifieds/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .catalog import catalog_router
from .catalog.store import Catalog
from .config import Settings, get_settings
from .errors import CatalogError
from .logging_setup import setup_logging
from .storage import JsonDirectoryStorage, MemoryStorage


logger = logging.getLogger(__name__)


def build_catalog(settings: Settings) -> Catalog:
    if settings.storage_backend == "memory":
        return Catalog(MemoryStorage())
    return Catalog(JsonDirectoryStorage(settings.data_dir))


def create_app(
    catalog: Optional[Catalog] = None, settings: Optional[Settings] = None
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Classifieds Catalog",
        description=(
            "Boards of classified listings (jobs, housing, for sale, "
            "community) keyed by group name."
        ),
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.catalog = catalog or build_catalog(settings)

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError):
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Classifieds catalog live"}

    app.include_router(catalog_router)
    logger.info("Catalog app ready (storage=%s)", settings.storage_backend)
    return app


app = create_app()

"""
PC Build Catalog API - FastAPI Main Entry

LOCAL:
    pip install -e ".[test]"
    DATA_PATH=data/catalog.json python -m uvicorn buildcatalog.main:app --reload --port 8000

TRY IT:
    curl -i http://127.0.0.1:8000/health
    curl -i "http://127.0.0.1:8000/v1/laptops?brand=Dell&brand=Acer&minRam=16&sortBy=price&sortOrder=desc"
    curl -i "http://127.0.0.1:8000/v1/monitors?minRefreshRate=144&panelType=IPS"
    curl -i "http://127.0.0.1:8000/v1/products?category=Storage&page=2"
    curl -i http://127.0.0.1:8000/v1/banners/homepage-top
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from buildcatalog.api.routes_ads import router as ads_router
from buildcatalog.api.routes_catalog import router as catalog_router
from buildcatalog.api.routes_meta import router as meta_router
from buildcatalog.core.config import settings


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="PC Build Catalog API",
        version=settings.APP_VERSION,
        description="Faceted catalogs of laptops, monitors, headsets, mini PCs and parts, plus banner ads",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {
            "name": "PC Build Catalog API",
            "status": "ok",
            "docs": "/docs",
            "health": "/health",
            "version": "/version",
        }

    app.include_router(meta_router)
    app.include_router(catalog_router)
    app.include_router(ads_router)

    logging.getLogger(__name__).info("App created (version=%s, data=%s)", settings.APP_VERSION, settings.DATA_PATH)
    return app


app = create_app()

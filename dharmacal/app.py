import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .middleware.logging import LoggingMiddleware
from .routers import daily_info as daily_info_router
from .routers import health as health_router
from .routers import occurrences as occurrences_router
from .services.day_store import InMemoryDayAttributeStore
from .services.panchanga_cache import PanchangaCache
from .services.panchanga_service import PanchangaEngine, PanchangaService
from .services.swiss_engine import SwissPanchangaEngine


def create_app(
    engine: Optional[PanchangaEngine] = None,
    cache: Optional[PanchangaCache] = None,
    store: Optional[InMemoryDayAttributeStore] = None,
) -> FastAPI:
    app = FastAPI(title="dharmacal", version="0.1.0")

    app_env = os.getenv("APP_ENV")
    is_dev = app_env is None or app_env.lower() in {"dev", "development"}
    if is_dev:
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            max_age=86400,
        )
    else:
        allowed = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "").split(",") if origin.strip()]
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            max_age=86400,
        )
    app.add_middleware(LoggingMiddleware)

    # one cache, service and store per process
    app.state.panchanga_cache = cache if cache is not None else PanchangaCache()
    app.state.panchanga_service = PanchangaService(engine or SwissPanchangaEngine(), app.state.panchanga_cache)
    app.state.day_store = store if store is not None else InMemoryDayAttributeStore()

    app.include_router(daily_info_router.router)
    app.include_router(occurrences_router.router)
    app.include_router(health_router.router)

    @app.get("/")
    def root():
        return {"message": "dharmacal API is running. See /v1/health and /docs."}

    return app


app = create_app()

# storefront/main.py
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from storefront.api import api_router
from storefront.api.errors import register_exception_handlers
from storefront.data.database import Base, init_db
from storefront.utils.settings import CORS_ORIGINS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info(f"Tables ready: {list(Base.metadata.tables.keys())}")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
        return response

    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    def root():
        return {
            "name": "Storefront API",
            "version": "1.0.0",
            "documentation": "/api/v1/health",
        }

    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import config, db
from core.cloudinary import MediaHostClient
from core.errors import install_error_handlers
from core.log import configure_logging
from faculty import router as faculty_router
from media import placeholder as placeholder_router
from media import proxy as proxy_router
from media import router as upload_router
from toast import router as toast_router

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
STARTED_AT = time.monotonic()


def _build_media_host() -> MediaHostClient | None:
    try:
        return MediaHostClient.from_env()
    except config.ConfigError as exc:
        # Upload/delete routes answer 503 until credentials are provided.
        logger.warning("%s Image uploads are disabled.", exc)
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Pool and outbound clients are built once per process.
    await db.init_pool()
    app.state.media_host = _build_media_host()
    app.state.proxy_client = proxy_router.build_proxy_client()
    logger.info("Server ready (environment: %s)", config.app_env())
    try:
        yield
    finally:
        await app.state.proxy_client.aclose()
        if app.state.media_host is not None:
            await app.state.media_host.aclose()
        await db.close_pool()


app = FastAPI(lifespan=lifespan, title="C-Square Club API", version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "x-api-key"],
    expose_headers=["Content-Length"],
)

install_error_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(faculty_router.router, tags=["faculty"])
app.include_router(toast_router.router, tags=["toast"])
app.include_router(upload_router.router, tags=["upload"])
app.include_router(proxy_router.router, tags=["image-proxy"])
app.include_router(placeholder_router.router, tags=["placeholder"])


@app.get("/api/health")
def health() -> dict:
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": config.app_env(),
    }


@app.get("/api")
def api_root() -> dict:
    return {"message": "C-Square Club API", "version": API_VERSION, "documentation": "/docs"}


@app.get("/")
def root() -> dict:
    return {
        "message": "C-Square Club Backend API",
        "status": "Running",
        "version": API_VERSION,
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth",
            "faculty": "/api/faculty",
            "toast": "/api/toast",
            "upload": "/api/upload",
            "imageProxy": "/api/proxy-image?url=https://example.com/image.jpg",
            "imageProxyHealth": "/api/proxy-image/health",
        },
    }

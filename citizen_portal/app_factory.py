import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from citizen_portal.api.admin.audit import router as audit_router
from citizen_portal.api.auth import router as auth_router
from citizen_portal.api.citizens import router as citizens_router
from citizen_portal.api.complaints import router as complaints_router
from citizen_portal.api.rpc import router as rpc_router
from citizen_portal.api.uploads import router as uploads_router
from citizen_portal.core.config import Settings, get_settings
from citizen_portal.core.errors import register_exception_handlers
from citizen_portal.core.security import TokenIssuer
from citizen_portal.db.mongo import connect, ensure_indexes
from citizen_portal.services.uploads_service import FILES_ROUTE

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, db=None) -> FastAPI:
    """
    Build the API. ``db`` is a Motor-compatible database; when omitted one is
    opened from ``settings.mongo_uri`` and indexes are ensured on start-up.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await ensure_indexes(app.state.db)
        logger.info("%s started (%s)", settings.app_name, settings.env)
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db if db is not None else connect(settings)
    app.state.token_issuer = TokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(citizens_router)
    app.include_router(complaints_router)
    app.include_router(rpc_router)
    app.include_router(uploads_router)
    app.include_router(audit_router)

    # uploaded attachments
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(FILES_ROUTE, StaticFiles(directory=upload_dir), name="files")

    @app.get("/")
    def root():
        return {"ok": True, "docs": "/docs"}

    return app

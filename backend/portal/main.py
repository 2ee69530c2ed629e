import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.requests import ClientDisconnect

from portal.api.routers import admit_cards as admit_cards_router
from portal.api.routers import auth as auth_router
from portal.api.routers import gallery as gallery_router
from portal.api.routers import students as students_router
from portal.api.routers import transactions as transactions_router
from portal.api.routers import uploads as uploads_router
from portal.api.static import UploadStaticFiles
from portal.core.config import Settings, get_settings
from portal.core.errors import AuthenticationError, PortalError
from portal.db.session import dispose_engine, get_session_factory
from portal.services import auth as auth_service
from portal.services.storage import LEGACY_PUBLIC_PATH, PUBLIC_PATH, UploadStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.admin_email and settings.admin_password:
        async with get_session_factory()() as session:
            await auth_service.ensure_admin(
                session, settings.admin_email, settings.admin_password
            )
    logger.info("Serving uploads from %s", app.state.upload_store.root)
    yield
    await dispose_engine()


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"{location}: {message}" if location else message},
    )


async def client_disconnect_handler(request: Request, exc: ClientDisconnect) -> JSONResponse:
    logger.warning("Client disconnected during %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Client disconnected"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        debug=settings.debug,
        title="Society Portal API",
        lifespan=lifespan,
    )
    app.state.upload_store = UploadStore.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ClientDisconnect, client_disconnect_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router.router)
    app.include_router(uploads_router.router)
    app.include_router(students_router.router)
    app.include_router(gallery_router.router)
    app.include_router(gallery_router.admin_router)
    app.include_router(admit_cards_router.router)
    app.include_router(admit_cards_router.admin_router)
    app.include_router(transactions_router.router)

    upload_root = str(app.state.upload_store.root)
    for path, name in ((PUBLIC_PATH, "uploads"), (LEGACY_PUBLIC_PATH, "objects")):
        app.mount(
            path,
            UploadStaticFiles(directory=upload_root, max_age=settings.static_cache_max_age),
            name=name,
        )

    return app


app = create_app()

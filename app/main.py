import time
from contextlib import asynccontextmanager
from typing import cast

import uvicorn
from fastapi import FastAPI, APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.errors import ServiceError, ValidationError
from app.core.settings import settings
from app.core.logger import logger
from app.v1_0.v1_router import v1_router
from app.app_containers import ApplicationContainer
from app.storage.database import Database


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = cast(ApplicationContainer, app.state.container)
    database = cast(Database, container.database())
    try:
        await database.ping()
    except Exception as e:
        # nothing can be served without the database
        logger.critical("Database unreachable at startup: %s", e)
        raise
    if settings.DB_CREATE_SCHEMA:
        await database.create_schema()
        logger.info("Database schema ensured")
    logger.info(f"{settings.APP_NAME} starting in {settings.APP_ENV}")
    try:
        yield
    finally:
        logger.info(f"{settings.APP_NAME} shutdown")
        await database.dispose()


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    offending = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            # loc holds a character offset, not a field
            offending.append("body")
            continue
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        offending.append(".".join(loc) or "body")
    message = "; ".join(
        f"{name}: {err.get('msg')}" for name, err in zip(offending, exc.errors())
    )
    body = ValidationError(message or "Invalid request", fields=offending)
    return JSONResponse(status_code=body.status_code, content=body.to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "StoreError", "message": "Internal server error"},
    )


def create_app() -> FastAPI:
    container = ApplicationContainer()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )

    app.state.container = container

    origins = settings.CORS_ORIGINS_LIST
    allow_credentials = True

    if "*" in origins:
        # wildcard + credentials is not allowed by CORS
        allow_credentials = False

    logger.info("CORS origins=%s allow_credentials=%s", origins, allow_credentials)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        logger.debug("Incoming %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "%s %s -> 500 in %.1fms",
                request.method,
                request.url.path,
                (time.perf_counter() - start) * 1000,
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s in %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    base_router = APIRouter(prefix=settings.API_PREFIX)
    base_router.include_router(v1_router)
    app.include_router(base_router)

    return app


app = create_app()


def run() -> None:
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())

"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from user_api.api import health, users
from user_api.config import settings
from user_api.core.logging import setup_logging
from user_api.database.mongo import close_clients, get_database
from user_api.errors import StoreError, UserApiError
from user_api.infra.repositories.user import UserRepository
from user_api.middleware.request_logging import RequestLoggingMiddleware

setup_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="REST API for user registration, lookup and listing",
    version=settings.APP_VERSION,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(health.router, prefix=settings.API_PREFIX, tags=["Health"])
app.include_router(users.router, prefix=settings.API_PREFIX)


@app.exception_handler(UserApiError)
async def user_api_error_handler(request: Request, exc: UserApiError):
    if isinstance(exc, StoreError):
        logger.error(
            "Store failure on %s %s: %s", request.method, request.url.path, exc
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": details}
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": f"{settings.API_PREFIX}/docs",
    }


@app.on_event("startup")
def startup_event():
    try:
        UserRepository(get_database()).ensure_indexes()
        logger.info("Ensured indexes on %s", settings.MONGODB_USERS_COLLECTION)
    except (StoreError, PyMongoError):
        # Existing duplicates break the unique indexes; serve anyway
        logger.exception("Could not ensure user indexes")


@app.on_event("shutdown")
def shutdown_event():
    close_clients()

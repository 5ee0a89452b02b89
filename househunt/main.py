"""
FastAPI application entry point: app wiring, exception handlers and health endpoints.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from househunt.config import settings
from househunt.database import check_database_connection, create_tables, close_db_connection
from househunt.routers import auth_router, listings_router
from househunt.utils.exceptions import APIException
from househunt.services.error_handler import ErrorHandlerService

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} v{settings.app_version} starting ({settings.environment})")

    if not await check_database_connection():
        logger.error("Database unreachable at startup; requests will fail until it recovers")
    elif settings.is_sqlite:
        # SQLite databases are created in place; server databases are provisioned separately
        await create_tables()

    yield

    await close_db_connection()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Rental listings for property owners and tenants. "
        "Obtain a token from `/api/auth/register` or `/api/auth/login` and send it "
        "as `Authorization: Bearer <token>`; every listing endpoint requires it."
    ),
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and profile management"},
        {"name": "Listings", "description": "Browsing and owner listing management"},
        {"name": "Health", "description": "Service health endpoints"},
    ],
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(listings_router, prefix=settings.api_prefix)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc.errors(), request)


@app.exception_handler(PydanticValidationError)
async def model_validation_handler(request: Request, exc: PydanticValidationError):
    # Raised when a response or internal model fails validation
    return ErrorHandlerService.handle_validation_error(exc.errors(), request)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "docs": app.docs_url,
        "api_prefix": settings.api_prefix,
    }


@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """
    Liveness plus database connectivity, for container health checks and load balancers.
    """
    if not await check_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("househunt.main:app", host=settings.host, port=settings.port, reload=settings.debug)

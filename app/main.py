"""Aplicación principal FastAPI para el catálogo de repuestos Tesla"""
import logging
import sys
import uuid
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

from prometheus_fastapi_instrumentator import Instrumentator
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from app.core.cache import cache
from app.core.config import settings
from app.core.database import create_database
from app.core.exceptions import CatalogError, PersistenceError
from app.api.v1.api import api_router
from app.api.v1.routers.health import router as health_router

# Configurar structlog
log_level_name = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
log_level = getattr(logging, log_level_name.upper(), logging.INFO)
logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# Mensajes de error centralizados
ERROR_MESSAGES = {
    "GENERIC": "Error interno del servidor",
    "DATABASE": "Error en base de datos",
    "REDIS": "Error en servicio Redis",
}


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str | None = None,
    details: dict | None = None,
) -> JSONResponse:
    """Respuesta JSON con el formato común de error"""
    error = {
        "code": status_code,
        "message": message,
        "path": str(request.url.path),
    }
    if error_code:
        error["error_code"] = error_code
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "timestamp": time.time()},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Iniciando catálogo de repuestos...")

    if settings.AUTO_CREATE_TABLES:
        create_database()

    if settings.REDIS_URL:
        safe_url = settings.REDIS_URL.split("@")[-1]
        if not await cache.ping():
            logger.error("No se pudo conectar a Redis, el cache queda inactivo", redis_url=safe_url)
    else:
        logger.warning("REDIS_URL no configurada, cache deshabilitado")

    try:
        yield
    finally:
        await cache.close()
        logger.info("Cerrando aplicación...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description="""
    API REST del catálogo de repuestos para vehículos Tesla.

    * Árbol de categorías de hasta tres niveles con conteo agregado de productos
    * CRUD y búsqueda de productos
    * Importación masiva desde hojas de cálculo con asignación automática de categorías
    """,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS y TrustedHosts
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
if not settings.DEBUG:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# Middleware de logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    bind_contextvars(request_id=request_id)

    start = time.time()
    logger.info("Request", method=request.method, url=str(request.url))
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Error procesando request")
        clear_contextvars()
        raise

    elapsed = round(time.time() - start, 3)
    logger.info("Response", status_code=response.status_code, process_time=elapsed, path=request.url.path)
    response.headers["X-Process-Time"] = str(elapsed)
    response.headers["X-Request-ID"] = request_id
    clear_contextvars()
    return response

# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(request, exc.status_code, exc.detail or ERROR_MESSAGES["GENERIC"])

@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    if isinstance(exc, PersistenceError):
        logger.error("Error de persistencia", error=exc.message, **exc.details)
        return error_response(request, exc.status_code, exc.public_message, exc.error_code)
    logger.info("Error de dominio", error_code=exc.error_code, error=exc.message)
    return error_response(request, exc.status_code, exc.message, exc.error_code, exc.details)

@app.exception_handler(RedisError)
async def redis_exception_handler(request: Request, exc: RedisError):
    logger.exception("Error en Redis")
    return error_response(request, 500, ERROR_MESSAGES["REDIS"])

@app.exception_handler(SQLAlchemyError)
async def db_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Error en base de datos")
    return error_response(request, 500, ERROR_MESSAGES["DATABASE"])

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Error no manejado")
    return error_response(request, 500, ERROR_MESSAGES["GENERIC"])

# Routers
app.include_router(health_router)
app.include_router(api_router, prefix=settings.API_V1_STR)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)

# OpenAPI custom
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description=app.description,
        routes=app.routes,
    )
    if settings.BASE_URL:
        schema["servers"] = [{"url": settings.BASE_URL}]
    schema["tags"] = [
        {"name": "Categorías", "description": "Árbol de categorías y conteo de productos"},
        {"name": "Productos", "description": "Gestión, búsqueda e importación de productos"},
        {"name": "Health", "description": "Monitoreo y estado del sistema"},
    ]
    app.openapi_schema = schema
    return schema

app.openapi = custom_openapi

# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Tesla Parts Catalog API",
        "version": settings.PROJECT_VERSION,
        "health_url": "/health",
        "docs_url": "/docs",
        "features": [
            "Árbol de categorías", "Conteo agregado de productos",
            "Búsqueda de productos", "Importación masiva",
        ],
    }

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

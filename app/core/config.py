"""
Configuración principal de la aplicación Tesla Parts Catalog
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # Database
    DATABASE_URL: str = "sqlite:///./tesla_parts.db"
    AUTO_CREATE_TABLES: bool = True

    # Redis Cache
    REDIS_URL: str | None = None

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Tesla Parts Catalog API"
    PROJECT_VERSION: str = "1.0.0"
    DEBUG: bool = False
    BASE_URL: str | None = None

    # Cache TTL (seconds)
    CACHE_TTL_CATEGORIES: int = 600
    CACHE_TTL_PRODUCTS: int = 3600

    # Árbol de categorías
    CATEGORY_MAX_LEVEL: int = 3
    CATEGORY_MAX_DEPTH_GUARD: int = 32
    AUTO_CATEGORY_SORT_ORDER: int = 999
    UNCATEGORIZED_NAME: str = "Uncategorized"

    # Importación masiva
    IMPORT_DEFAULT_MODEL: str = "MODEL_3"
    IMPORT_DEFAULT_STOCK: int = 10
    IMPORT_DEFAULT_LOW_STOCK: int = 5
    IMPORT_ROW_OFFSET: int = 2
    IMPORT_MAX_ROWS: int = 5000

    # Búsqueda
    SEARCH_RESULT_LIMIT: int = 50

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "*"
    ALLOWED_HOSTS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings():
    """Obtener configuración singleton"""
    return Settings()


# Instancia global de configuración
settings = get_settings()

"""Configuración de cache Redis para el catálogo"""
import json
from typing import Any, Optional

from redis import asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from app.core.config import settings

logger = structlog.get_logger(__name__)

CATEGORY_KEY_PREFIX = "categories"
PRODUCT_KEY_PREFIX = "product"


class RedisCache:
    """Cliente Redis asíncrono para cache

    Sin ``REDIS_URL`` configurada el cache no hace nada y las lecturas
    devuelven ``None``.
    """

    def __init__(self):
        self.redis_client: aioredis.Redis | None = None

    async def _connect(self) -> None:
        """Conectar a Redis"""
        if not settings.REDIS_URL:
            return
        try:
            self.redis_client = aioredis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await self.redis_client.ping()
            logger.info("Conexión a Redis exitosa")
        except RedisError:
            logger.exception("Error conectando a Redis")
            self.redis_client = None

    async def ping(self) -> bool:
        """Comprobar que Redis responde"""
        if not self.redis_client:
            await self._connect()
        if not self.redis_client:
            return False
        try:
            return bool(await self.redis_client.ping())
        except RedisError:
            logger.warning("Redis no responde al ping")
            return False

    async def close(self) -> None:
        """Cerrar la conexión si existe"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None

    async def get(self, key: str) -> Optional[Any]:
        """Obtener valor del cache"""
        if not self.redis_client:
            await self._connect()
        if not self.redis_client:
            return None

        try:
            value = await self.redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except (RedisError, json.JSONDecodeError):
            logger.exception("Error obteniendo del cache", key=key)
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Establecer valor en el cache"""
        if not self.redis_client:
            await self._connect()
        if not self.redis_client:
            return False

        try:
            serialized_value = json.dumps(value, default=str)
            if ttl:
                await self.redis_client.setex(key, ttl, serialized_value)
            else:
                await self.redis_client.set(key, serialized_value)
            return True
        except (RedisError, TypeError):
            logger.exception("Error estableciendo en cache", key=key)
            return False

    async def delete(self, key: str) -> bool:
        """Eliminar valor del cache"""
        if not self.redis_client:
            await self._connect()
        if not self.redis_client:
            return False

        try:
            return bool(await self.redis_client.delete(key))
        except RedisError:
            logger.exception("Error eliminando del cache", key=key)
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Eliminar claves que coincidan con el patrón"""
        if not self.redis_client:
            await self._connect()
        if not self.redis_client:
            return 0

        try:
            keys = await self.redis_client.keys(pattern)
            if keys:
                return await self.redis_client.delete(*keys)
            return 0
        except RedisError:
            logger.exception("Error eliminando patrón", pattern=pattern)
            return 0


# Instancia global del cache
cache = RedisCache()


def cache_categories_key(view: str) -> str:
    """Generar clave de cache para el listado de categorías"""
    return f"{CATEGORY_KEY_PREFIX}:{view}"


def cache_product_key(product_id: str) -> str:
    """Generar clave de cache para producto"""
    return f"{PRODUCT_KEY_PREFIX}:{product_id}"


async def invalidate_catalog(product_id: Optional[str] = None) -> None:
    """Invalidar listados de categorías (y un producto si se indica)"""
    await cache.delete_pattern(f"{CATEGORY_KEY_PREFIX}:*")
    if product_id:
        await cache.delete(cache_product_key(product_id))

"""
Endpoints de productos e importación masiva
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.core.cache import cache, cache_product_key, invalidate_catalog
from app.core.config import settings
from app.core.database import get_db
from app.schemas.catalog_import import BulkImportRequest, ImportSummary
from app.schemas.common import ErrorResponse
from app.schemas.product import (
    ProductCreate, ProductUpdate, ProductDetailResponse, ProductListResponse,
    ProductSearchResponse,
)
from app.services.import_service import import_service
from app.services.product_service import product_service, serialize_product

router = APIRouter()


@router.get("", response_model=ProductListResponse, summary="Listar productos activos")
async def list_products(
    category_id: Optional[UUID] = Query(None, description="Filtrar por ID de categoría"),
    exclude: Optional[UUID] = Query(None, description="Excluir un producto"),
    limit: Optional[int] = Query(None, ge=1, le=500, description="Máximo de resultados"),
    db: Session = Depends(get_db),
):
    return product_service.list_products(db, category_id, exclude, limit)


@router.get(
    "/search",
    response_model=ProductSearchResponse,
    summary="Buscar productos",
    responses={400: {"model": ErrorResponse, "description": "Filtros inválidos"}},
)
async def search_products(
    q: str = Query("", max_length=100, description="Texto a buscar"),
    sort: str = Query("relevance", description="relevance | price-low | price-high | newest | name"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    categories: Optional[str] = Query(None, description="Nombres de categoría separados por comas"),
    db: Session = Depends(get_db),
):
    """
    Buscar en nombre, descripción, SKU y modelos compatibles.

    Un término vacío devuelve una lista vacía.
    """
    names = [c.strip() for c in categories.split(",")] if categories else []
    return product_service.search_products(db, q, sort, min_price, max_price, names)


@router.post(
    "/bulk-import",
    response_model=ImportSummary,
    summary="Importación masiva",
    description="Importa filas ya parseadas de una hoja; los fallos por fila se informan en el resumen",
    responses={400: {"model": ErrorResponse, "description": "Lote inválido"}},
)
async def bulk_import(payload: BulkImportRequest, db: Session = Depends(get_db)):
    summary = import_service.import_products(db, payload.data, payload.default_model)
    await invalidate_catalog()
    return summary


@router.get(
    "/slug/{slug}",
    response_model=ProductDetailResponse,
    summary="Obtener producto por slug",
    responses={404: {"model": ErrorResponse, "description": "Producto no encontrado"}},
)
async def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    return serialize_product(product_service.get_product_by_slug(db, slug), detail=True)


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    summary="Obtener producto por ID",
    responses={404: {"model": ErrorResponse, "description": "Producto no encontrado"}},
)
async def get_product(
    product_id: UUID = Path(..., description="ID único del producto"),
    db: Session = Depends(get_db),
):
    cache_key = cache_product_key(str(product_id))
    cached = await cache.get(cache_key)
    if cached:
        return cached

    product = serialize_product(product_service.get_product(db, product_id), detail=True)
    await cache.set(
        cache_key,
        ProductDetailResponse.model_validate(product).model_dump(mode="json"),
        settings.CACHE_TTL_PRODUCTS,
    )
    return product


@router.post(
    "",
    response_model=ProductDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear producto",
    responses={
        400: {"model": ErrorResponse, "description": "Datos inválidos"},
        404: {"model": ErrorResponse, "description": "Categoría no encontrada"},
        409: {"model": ErrorResponse, "description": "SKU o slug duplicado"},
    },
)
async def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = product_service.create_product(db, payload.model_dump())
    await invalidate_catalog()
    return serialize_product(product, detail=True)


@router.put(
    "/{product_id}",
    response_model=ProductDetailResponse,
    summary="Actualizar producto",
    responses={
        404: {"model": ErrorResponse, "description": "Producto no encontrado"},
        409: {"model": ErrorResponse, "description": "SKU o slug duplicado"},
    },
)
async def update_product(
    payload: ProductUpdate,
    product_id: UUID = Path(..., description="ID único del producto"),
    db: Session = Depends(get_db),
):
    product = product_service.update_product(
        db, product_id, payload.model_dump(exclude_unset=True)
    )
    await invalidate_catalog(str(product_id))
    return serialize_product(product, detail=True)


@router.delete(
    "/{product_id}",
    summary="Eliminar producto",
    responses={404: {"model": ErrorResponse, "description": "Producto no encontrado"}},
)
async def delete_product(
    product_id: UUID = Path(..., description="ID único del producto"),
    db: Session = Depends(get_db),
):
    product_service.delete_product(db, product_id)
    await invalidate_catalog(str(product_id))
    return {"success": True}

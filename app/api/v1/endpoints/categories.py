"""
Endpoints de categorías
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.cache import cache, cache_categories_key, invalidate_catalog
from app.core.config import settings
from app.core.database import get_db
from app.schemas.category import (
    CategoryCreate, CategoryUpdate, CategoryWithCounts, CategoryTreeNode,
    CategoryMutationResponse, HierarchySetupRequest, HierarchySetupResponse,
    CleanCategoriesResponse,
)
from app.schemas.common import ErrorResponse
from app.services.category_service import category_service, serialize_category

router = APIRouter()


@router.get(
    "",
    response_model=List[CategoryWithCounts],
    summary="Listar categorías",
    description="Todas las categorías con conteo de productos directo y agregado",
)
async def list_categories(db: Session = Depends(get_db)):
    """
    Listar categorías ordenadas por sort_order y nombre.

    - **product_count**: productos de la categoría y de todas sus descendientes
    - **direct_product_count**: productos asignados directamente
    """
    cache_key = cache_categories_key("flat")
    cached = await cache.get(cache_key)
    if cached:
        return cached

    categories = category_service.list_with_counts(db)
    await cache.set(
        cache_key,
        [CategoryWithCounts.model_validate(c).model_dump(mode="json") for c in categories],
        settings.CACHE_TTL_CATEGORIES,
    )
    return categories


@router.get(
    "/tree",
    response_model=List[CategoryTreeNode],
    summary="Árbol de categorías",
)
async def category_tree(db: Session = Depends(get_db)):
    """Categorías anidadas (raíz > principal > subcategoría) con conteos"""
    cache_key = cache_categories_key("tree")
    cached = await cache.get(cache_key)
    if cached:
        return cached

    tree = category_service.get_tree(db)
    await cache.set(
        cache_key,
        [CategoryTreeNode.model_validate(node).model_dump(mode="json") for node in tree],
        settings.CACHE_TTL_CATEGORIES,
    )
    return tree


@router.post(
    "",
    response_model=CategoryMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear categoría",
    responses={
        400: {"model": ErrorResponse, "description": "Datos inválidos"},
        409: {"model": ErrorResponse, "description": "Nombre duplicado en el mismo nivel"},
    },
)
async def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    category = category_service.create_category(
        db,
        name=payload.name,
        description=payload.description,
        parent_id=payload.parent_id,
        level=payload.level,
        is_active=payload.is_active,
    )
    await invalidate_catalog()
    return {"success": True, "category": serialize_category(category)}


@router.post(
    "/hierarchy",
    response_model=HierarchySetupResponse,
    summary="Crear jerarquía completa",
    description="Crea un árbol anidado omitiendo las categorías existentes",
)
async def setup_hierarchy(payload: HierarchySetupRequest, db: Session = Depends(get_db)):
    result = category_service.setup_hierarchy(db, payload.hierarchy.model_dump())
    await invalidate_catalog()
    return {"success": True, **result}


@router.delete(
    "",
    response_model=CleanCategoriesResponse,
    summary="Eliminar todas las categorías",
    responses={409: {"model": ErrorResponse, "description": "Existen productos"}},
)
async def clean_all_categories(db: Session = Depends(get_db)):
    deleted = category_service.clean_all(db)
    await invalidate_catalog()
    message = "No categories to delete" if deleted == 0 else f"Deleted {deleted} categories"
    return {"success": True, "message": message, "deleted": deleted}


@router.get(
    "/{category_id}",
    response_model=CategoryWithCounts,
    summary="Obtener categoría",
    responses={404: {"model": ErrorResponse, "description": "Categoría no encontrada"}},
)
async def get_category(
    category_id: UUID = Path(..., description="ID de la categoría"),
    db: Session = Depends(get_db),
):
    return category_service.get_with_counts(db, category_id)


@router.put(
    "/{category_id}",
    response_model=CategoryMutationResponse,
    summary="Actualizar categoría",
    responses={
        404: {"model": ErrorResponse, "description": "Categoría no encontrada"},
        409: {"model": ErrorResponse, "description": "Nombre duplicado"},
    },
)
async def update_category(
    payload: CategoryUpdate,
    category_id: UUID = Path(..., description="ID de la categoría"),
    db: Session = Depends(get_db),
):
    category = category_service.update_category(
        db, category_id, payload.model_dump(exclude_unset=True)
    )
    await invalidate_catalog()
    return {"success": True, "category": serialize_category(category)}


@router.delete(
    "/{category_id}",
    summary="Eliminar categoría",
    responses={
        404: {"model": ErrorResponse, "description": "Categoría no encontrada"},
        409: {"model": ErrorResponse, "description": "La categoría tiene productos"},
    },
)
async def delete_category(
    category_id: UUID = Path(..., description="ID de la categoría"),
    db: Session = Depends(get_db),
):
    category_service.delete_category(db, category_id)
    await invalidate_catalog()
    return {"success": True}

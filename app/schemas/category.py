"""
Schemas para categorías
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import ORM_CONFIG


class CategoryCreate(BaseModel):
    """Request para crear categoría"""
    name: str = Field(..., max_length=100, description="Nombre de la categoría")
    description: Optional[str] = Field(None, description="Descripción opcional")
    parent_id: Optional[UUID] = Field(None, description="Categoría padre (debe existir)")
    level: Optional[int] = Field(None, description="Nivel; se recalcula a partir del padre")
    is_active: bool = Field(True, description="Si la categoría está activa")

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Brakes",
                "description": "Brake pads, rotors and calipers",
                "parent_id": None,
            }
        }
    }


class CategoryUpdate(BaseModel):
    """Request para actualización parcial de categoría"""
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)


class CategoryResponse(BaseModel):
    """Categoría sin conteos"""
    model_config = ORM_CONFIG

    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    level: int
    parent_id: Optional[UUID] = None
    sort_order: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryWithCounts(CategoryResponse):
    """Categoría con conteo directo y agregado de productos"""
    product_count: int = Field(..., description="Productos propios y de todas las descendientes")
    direct_product_count: int = Field(..., description="Productos asignados directamente")


class CategoryTreeNode(CategoryWithCounts):
    """Nodo del árbol de categorías"""
    children: List[CategoryTreeNode] = Field(default_factory=list)


class CategoryMutationResponse(BaseModel):
    """Respuesta de creación/actualización"""
    success: bool = True
    category: CategoryResponse


class HierarchyNode(BaseModel):
    """Nodo de entrada para crear una jerarquía completa"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    children: List[HierarchyNode] = Field(default_factory=list)


class HierarchySetupRequest(BaseModel):
    hierarchy: HierarchyNode


class HierarchySetupResponse(BaseModel):
    """Resultado de la creación de jerarquía"""
    success: bool = True
    created: int = Field(..., description="Categorías creadas")
    skipped: int = Field(..., description="Categorías ya existentes")
    errors: List[str] = Field(default_factory=list)


class CleanCategoriesResponse(BaseModel):
    success: bool = True
    message: str
    deleted: int


CategoryTreeNode.model_rebuild()
HierarchyNode.model_rebuild()

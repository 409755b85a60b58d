"""
Schemas para productos
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import CategoryInfo


class ProductCreate(BaseModel):
    """Request para crear un producto"""
    sku: str = Field(..., min_length=1, max_length=100, description="SKU único")
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del producto")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Precio")
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=100)
    compare_at_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    low_stock_threshold: int = Field(5, ge=0)
    track_quantity: bool = True
    compatible_models: Optional[Union[List[str], str]] = Field(
        None, description="Modelos compatibles: lista o texto separado por comas"
    )
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Optional[str] = Field(None, max_length=100)
    is_active: bool = True
    is_featured: bool = False
    category_id: Optional[UUID] = Field(None, description="Categoría por ID")
    category_name: Optional[str] = Field(
        None, description="Categoría por nombre; se resuelve o se crea si no existe"
    )
    images: List[str] = Field(default_factory=list, description="URLs de imágenes en orden")

    model_config = {
        "json_schema_extra": {
            "example": {
                "sku": "BP-M3-FRONT",
                "name": "Front Brake Pad Set",
                "price": "49.99",
                "stock_quantity": 8,
                "compatible_models": ["MODEL_3", "MODEL_Y"],
                "category_name": "Brakes",
                "images": ["https://cdn.example.com/bp-front.jpg"],
            }
        }
    }


class ProductUpdate(BaseModel):
    """Request para actualización parcial de un producto"""
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=100)
    compare_at_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    track_quantity: Optional[bool] = None
    compatible_models: Optional[Union[List[str], str]] = None
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    images: Optional[List[str]] = None


class ProductImageResponse(BaseModel):
    id: UUID
    url: str
    alt_text: Optional[str] = None
    sort_order: int


class ProductResponse(BaseModel):
    """Producto en listados"""
    id: UUID
    sku: str
    name: str
    slug: str
    price: float
    compare_at_price: Optional[float] = None
    stock_quantity: int
    compatible_models: Optional[str] = None
    is_active: bool
    is_featured: bool
    category: Optional[CategoryInfo] = None
    images: List[ProductImageResponse] = Field(default_factory=list)


class ProductDetailResponse(ProductResponse):
    """Respuesta detallada de producto"""
    description: Optional[str] = None
    short_description: Optional[str] = None
    low_stock_threshold: int
    track_quantity: bool
    is_low_stock: bool
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    model_list: List[str] = Field(default_factory=list, description="Modelos compatibles")
    model_3_compatible: bool = False
    model_y_compatible: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    total: int


class ProductSearchResponse(BaseModel):
    """Respuesta de búsqueda de productos"""
    products: List[ProductResponse]
    total: int
    query: str
    filters: dict

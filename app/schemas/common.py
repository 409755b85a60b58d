"""
Schemas comunes para la API
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


class ErrorDetail(BaseModel):
    """Detalle de un error de la API"""
    code: int = Field(..., description="Código HTTP")
    message: str = Field(..., description="Mensaje legible")
    path: str = Field(..., description="Ruta solicitada")
    error_code: Optional[str] = Field(None, description="Código de error específico")
    details: Optional[Dict[str, Any]] = Field(None, description="Detalles adicionales del error")


class ErrorResponse(BaseModel):
    """Schema para respuestas de error"""
    success: bool = Field(False)
    error: ErrorDetail
    timestamp: float = Field(..., description="Epoch de la respuesta")


class CategoryInfo(BaseModel):
    """Información básica de categoría"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="ID único de la categoría")
    name: str = Field(..., description="Nombre de la categoría")
    slug: str = Field(..., description="Slug de la categoría")
    level: int = Field(..., description="Nivel en el árbol (1-3)")


class HealthCheckResponse(BaseModel):
    """Respuesta del health check"""
    status: str = Field(..., description="Estado del servicio")
    database: str = Field(..., description="Estado de la base de datos")
    redis: str = Field(..., description="Estado del cache")


# Configuración base para schemas que leen objetos ORM
ORM_CONFIG = ConfigDict(from_attributes=True, populate_by_name=True, use_enum_values=True)

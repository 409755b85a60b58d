"""
Schemas para la importación masiva de productos
"""
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ImportRow(BaseModel):
    """
    Fila cruda de una hoja de cálculo ya parseada.

    Acepta claves camelCase (las del parser de hojas) o snake_case. Los
    valores numéricos se dejan sin convertir: el importador los valida fila
    a fila y registra los fallos en el resumen.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Any] = None
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    compatible_models: Optional[str] = Field(
        None, validation_alias=AliasChoices("compatible_models", "compatibleModels")
    )
    stock_quantity: Optional[Any] = Field(
        None, validation_alias=AliasChoices("stock_quantity", "stockQuantity")
    )
    low_stock_threshold: Optional[Any] = Field(
        None, validation_alias=AliasChoices("low_stock_threshold", "lowStockThreshold")
    )
    track_quantity: Optional[Any] = Field(
        None, validation_alias=AliasChoices("track_quantity", "trackQuantity")
    )
    is_active: Optional[Any] = Field(
        None, validation_alias=AliasChoices("is_active", "isActive")
    )
    weight: Optional[Any] = None
    dimensions: Optional[str] = None

    @field_validator(
        "name", "sku", "description", "category", "subcategory",
        "compatible_models", "dimensions",
        mode="before",
    )
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return ",".join(str(v) for v in value)
        text = str(value).strip()
        return text or None

    @property
    def category_label(self) -> Optional[str]:
        """Etiqueta usada para resolver la categoría: subcategoría si existe"""
        return self.subcategory or self.category


class BulkImportRequest(BaseModel):
    """Lote de filas a importar"""
    data: List[Any] = Field(..., description="Filas en orden de la hoja; cada fila se valida por separado")
    default_model: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("default_model", "defaultModel", "detectedModel"),
        description="Modelo detectado para todo el lote (MODEL_3 por defecto)",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "data": [
                    {"name": "Brake Pad", "sku": "BP-1", "price": 49.99,
                     "category": "Brakes", "stockQuantity": 8},
                ],
                "default_model": "MODEL_3",
            }
        }
    }


class ImportFailure(BaseModel):
    """Fallo de una fila"""
    row: int = Field(..., description="Número de fila en la hoja (índice + 2)")
    sku: Optional[str] = None
    message: str
    duplicate: bool = Field(False, description="Fila omitida por SKU duplicado")


class ImportSummary(BaseModel):
    """Resumen del lote: único contrato expuesto al llamador"""
    total: int
    successful: int
    failed: int
    duplicates: int
    errors: List[ImportFailure] = Field(default_factory=list)
    categories_created: List[str] = Field(default_factory=list)
    default_model: str
    message: str

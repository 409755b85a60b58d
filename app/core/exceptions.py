"""
Excepciones de dominio del catálogo

Los servicios lanzan estas excepciones y los handlers registrados en
``app.main`` las convierten en respuestas JSON con el formato común de error.
"""
from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Error base del catálogo"""

    status_code = 500
    error_code = "CATALOG_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(CatalogError):
    """Datos de entrada mal formados o incompletos"""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFoundError(CatalogError):
    """Entidad referenciada inexistente"""

    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(CatalogError):
    """Violación de unicidad o de integridad referencial"""

    status_code = 409
    error_code = "CONFLICT"


class PersistenceError(CatalogError):
    """Fallo inesperado del almacenamiento; el detalle solo se registra en logs"""

    status_code = 500
    error_code = "PERSISTENCE_ERROR"
    public_message = "Error en base de datos"


class ExternalServiceError(CatalogError):
    """Fallo de un servicio externo (pagos, envíos)"""

    status_code = 502
    error_code = "EXTERNAL_SERVICE_ERROR"

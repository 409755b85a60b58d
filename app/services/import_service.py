"""
Importación masiva de productos desde filas de hoja de cálculo

Cada fila se procesa de forma aislada: un fallo se registra en el resumen
del lote y el procesamiento continúa con la siguiente. Cada producto creado
se confirma en su propia transacción, por lo que el lote no es atómico.
"""
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import CatalogError, ValidationError
from app.repositories.product_repository import product_repository
from app.schemas.catalog_import import ImportRow
from app.services.category_matcher import category_matcher
from app.utils.compatible_models import encode_models, normalize_model
from app.utils.text import slugify, truncate

logger = structlog.get_logger(__name__)

FALSE_VALUES = {"false", "0", "no", "n", "off"}


def parse_flag(value: Any, default: bool = True) -> bool:
    """Solo un falso explícito desactiva la bandera"""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() not in FALSE_VALUES


def parse_price(value: Any) -> Tuple[Optional[Decimal], Optional[str]]:
    """Precio finito >= 0; devuelve (precio, mensaje de error)"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, "Product price is required"
    if isinstance(value, bool):
        return None, "Product price must be a number"
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None, f"Product price must be a number, got '{value}'"
    if not math.isfinite(number):
        return None, "Product price must be a finite number"
    if number < 0:
        return None, "Product price cannot be negative"
    try:
        return Decimal(str(number)).quantize(Decimal("0.01")), None
    except InvalidOperation:
        return None, f"Product price must be a number, got '{value}'"


def parse_int(value: Any, field: str) -> Tuple[Optional[int], Optional[str]]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, None
    if isinstance(value, bool):
        return None, f"{field} must be an integer"
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None, f"{field} must be an integer"
    if not math.isfinite(number) or not number.is_integer():
        return None, f"{field} must be a whole number, got '{value}'"
    if number < 0:
        return None, f"{field} cannot be negative"
    return int(number), None


def parse_float(value: Any, field: str) -> Tuple[Optional[float], Optional[str]]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None, f"{field} must be a number"
    if not math.isfinite(number) or number < 0:
        return None, f"{field} must be a non-negative number"
    return number, None


class ImportService:
    """Importador masivo de productos"""

    def __init__(self):
        self.product_repo = product_repository
        self.matcher = category_matcher

    def import_products(
        self,
        db: Session,
        rows: Sequence[Any],
        default_model: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Importar filas en orden y devolver el resumen del lote.

        Args:
            rows: filas crudas ya parseadas desde la hoja
            default_model: tag de modelo del lote; las filas pueden
                sobrescribirlo con su propia columna de modelos compatibles

        Returns:
            dict: total, successful, failed, duplicates, errors,
            categories_created, default_model, message
        """
        if not isinstance(rows, (list, tuple)):
            raise ValidationError("Invalid data format: expected a list of rows")
        if len(rows) > settings.IMPORT_MAX_ROWS:
            raise ValidationError(
                f"Import batch has {len(rows)} rows; maximum is {settings.IMPORT_MAX_ROWS}"
            )
        try:
            batch_model = normalize_model(default_model or settings.IMPORT_DEFAULT_MODEL).value
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        summary = {
            "total": len(rows),
            "successful": 0,
            "failed": 0,
            "duplicates": 0,
            "errors": [],
            "categories_created": [],
            "default_model": batch_model,
        }
        log = logger.bind(batch_size=len(rows), default_model=batch_model)
        log.info("Inicio de importación masiva")

        for index, raw in enumerate(rows):
            row_number = index + settings.IMPORT_ROW_OFFSET
            sku = raw.get("sku") if isinstance(raw, dict) else None
            try:
                self._import_row(db, raw, batch_model, summary)
                summary["successful"] += 1
            except _RowFailure as failure:
                self._record_failure(summary, row_number, failure.sku or sku, failure.message, failure.duplicate)
            except CatalogError as exc:
                db.rollback()
                self._record_failure(summary, row_number, sku, exc.message)
            except Exception as exc:
                db.rollback()
                log.exception("Error inesperado importando fila", row=row_number, sku=sku)
                self._record_failure(summary, row_number, sku, str(exc) or exc.__class__.__name__)

        summary["message"] = (
            f"Successfully imported {summary['successful']} products. "
            f"Created {len(summary['categories_created'])} new categories."
        )
        log.info(
            "Importación masiva finalizada",
            successful=summary["successful"],
            failed=summary["failed"],
            duplicates=summary["duplicates"],
            categories_created=len(summary["categories_created"]),
        )
        return summary

    def _import_row(self, db: Session, raw: Any, batch_model: str, summary: Dict[str, Any]) -> None:
        if not isinstance(raw, dict):
            raise _RowFailure("Row must be an object")
        try:
            row = ImportRow.model_validate(raw)
        except SchemaValidationError as exc:
            raise _RowFailure(f"Malformed row: {exc.errors()[0]['msg']}") from exc

        values, problems = self._validate(row)
        if problems:
            raise _RowFailure("; ".join(problems), sku=row.sku)

        match = self.matcher.resolve(db, row.category_label, batch_model)
        if match.created:
            summary["categories_created"].append(match.category.name)

        if self.product_repo.sku_exists(db, row.sku):
            raise _RowFailure(
                f"Product with SKU \"{row.sku}\" already exists", sku=row.sku, duplicate=True
            )

        slug = slugify(row.name) or slugify(row.sku)
        if self.product_repo.slug_exists(db, slug):
            slug = f"{slug}-{slugify(row.sku)}".strip("-")

        compatible_models = values["compatible_models"] or batch_model
        description = row.description or None

        self.product_repo.create(db, obj_in={
            "name": row.name,
            "sku": row.sku,
            "slug": slug,
            "description": description,
            "short_description": truncate(row.name, 100),
            "price": values["price"],
            "stock_quantity": values["stock_quantity"] or settings.IMPORT_DEFAULT_STOCK,
            "low_stock_threshold": values["low_stock_threshold"] or settings.IMPORT_DEFAULT_LOW_STOCK,
            "track_quantity": parse_flag(row.track_quantity),
            "compatible_models": compatible_models,
            "weight": values["weight"],
            "dimensions": row.dimensions,
            "category_id": match.category_id,
            "is_active": parse_flag(row.is_active),
            "is_featured": False,
            "meta_title": truncate(row.name, 255),
            "meta_description": truncate(description or row.name, 160),
        })

    @staticmethod
    def _validate(row: ImportRow) -> Tuple[Dict[str, Any], List[str]]:
        problems: List[str] = []
        values: Dict[str, Any] = {}

        if not row.name:
            problems.append("Product name is required")
        if not row.sku:
            problems.append("Product SKU is required")

        values["price"], error = parse_price(row.price)
        if error:
            problems.append(error)

        for field, label in (("stock_quantity", "stockQuantity"), ("low_stock_threshold", "lowStockThreshold")):
            values[field], error = parse_int(getattr(row, field), label)
            if error:
                problems.append(error)

        values["weight"], error = parse_float(row.weight, "weight")
        if error:
            problems.append(error)

        try:
            values["compatible_models"] = encode_models(row.compatible_models)
        except ValueError as exc:
            values["compatible_models"] = None
            problems.append(str(exc))

        return values, problems

    @staticmethod
    def _record_failure(
        summary: Dict[str, Any],
        row_number: int,
        sku: Optional[str],
        message: str,
        duplicate: bool = False
    ) -> None:
        summary["failed"] += 1
        if duplicate:
            summary["duplicates"] += 1
        summary["errors"].append({
            "row": row_number,
            "sku": str(sku) if sku is not None else None,
            "message": message,
            "duplicate": duplicate,
        })
        logger.warning("Fila de importación rechazada", row=row_number, sku=sku, error=message)


class _RowFailure(Exception):
    """Fallo de validación o duplicado de una fila concreta"""

    def __init__(self, message: str, sku: Optional[str] = None, duplicate: bool = False):
        super().__init__(message)
        self.message = message
        self.sku = sku
        self.duplicate = duplicate


# Instancia global del servicio
import_service = ImportService()

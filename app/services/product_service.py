"""
Servicio de productos con lógica de negocio
"""
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.product import Product
from app.repositories.category_repository import category_repository
from app.repositories.product_repository import SORT_OPTIONS, product_repository
from app.services.category_matcher import category_matcher
from app.utils.compatible_models import VehicleModel, encode_models
from app.utils.text import slugify, truncate

logger = structlog.get_logger(__name__)

NULLABLE_FIELDS = ("compare_at_price", "description", "short_description", "weight", "dimensions")
REQUIRED_FIELDS = (
    "price", "stock_quantity", "low_stock_threshold", "track_quantity", "is_active", "is_featured",
)


def serialize_product(product: Product, detail: bool = False) -> Dict[str, Any]:
    """Convertir un producto ORM en dict de respuesta"""
    category = product.category
    data = {
        "id": product.id,
        "sku": product.sku,
        "name": product.name,
        "slug": product.slug,
        "price": float(product.price),
        "compare_at_price": float(product.compare_at_price) if product.compare_at_price is not None else None,
        "stock_quantity": product.stock_quantity,
        "compatible_models": product.compatible_models,
        "is_active": product.is_active,
        "is_featured": product.is_featured,
        "category": {
            "id": category.id,
            "name": category.name,
            "slug": category.slug,
            "level": category.level,
        } if category else None,
        "images": [
            {"id": img.id, "url": img.url, "alt_text": img.alt_text, "sort_order": img.sort_order}
            for img in product.images
        ],
    }
    if detail:
        models = product.model_list
        data.update({
            "description": product.description,
            "short_description": product.short_description,
            "low_stock_threshold": product.low_stock_threshold,
            "track_quantity": product.track_quantity,
            "is_low_stock": bool(product.is_low_stock),
            "weight": product.weight,
            "dimensions": product.dimensions,
            "meta_title": product.meta_title,
            "meta_description": product.meta_description,
            "model_list": models,
            "model_3_compatible": VehicleModel.MODEL_3.value in models,
            "model_y_compatible": VehicleModel.MODEL_Y.value in models,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
        })
    return data


class ProductService:
    """Servicio de productos: CRUD con unicidad de SKU y slug"""

    def __init__(self):
        self.product_repo = product_repository
        self.category_repo = category_repository
        self.matcher = category_matcher

    def _encode_models(self, value) -> Optional[str]:
        try:
            return encode_models(value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    def _resolve_category_id(
        self,
        db: Session,
        category_id: Optional[UUID],
        category_name: Optional[str],
        model_context: str
    ) -> UUID:
        if category_id is not None:
            if not self.category_repo.exists(db, category_id):
                raise NotFoundError(f"Category {category_id} not found")
            return category_id
        if category_name and category_name.strip():
            return self.matcher.resolve(db, category_name, model_context).category_id
        raise ValidationError("A category_id or category_name is required")

    def _product_slug(self, name: str, sku: str) -> str:
        slug = slugify(name) or slugify(sku)
        if not slug:
            raise ValidationError("Product name must contain letters or digits")
        return slug

    def create_product(self, db: Session, data: Dict[str, Any]) -> Product:
        """Crear producto con sus imágenes"""
        sku = (data.get("sku") or "").strip()
        name = (data.get("name") or "").strip()
        if not sku:
            raise ValidationError("Product SKU is required")
        if not name:
            raise ValidationError("Product name is required")

        if self.product_repo.sku_exists(db, sku):
            raise ConflictError(f"Product with SKU \"{sku}\" already exists")

        slug = self._product_slug(name, sku)
        if self.product_repo.slug_exists(db, slug):
            raise ConflictError(f"Product with slug \"{slug}\" already exists")

        compatible_models = self._encode_models(data.get("compatible_models"))
        model_context = (compatible_models or settings.IMPORT_DEFAULT_MODEL).split(",")[0]
        category_id = self._resolve_category_id(
            db, data.get("category_id"), data.get("category_name"), model_context
        )

        product = self.product_repo.create_with_images(db, {
            "sku": sku,
            "name": name,
            "slug": slug,
            "description": data.get("description") or None,
            "short_description": data.get("short_description") or truncate(name, 100),
            "price": data["price"],
            "compare_at_price": data.get("compare_at_price"),
            "stock_quantity": data.get("stock_quantity") or 0,
            "low_stock_threshold": data.get("low_stock_threshold", 5),
            "track_quantity": data.get("track_quantity", True),
            "compatible_models": compatible_models,
            "weight": data.get("weight"),
            "dimensions": data.get("dimensions"),
            "is_active": data.get("is_active", True),
            "is_featured": data.get("is_featured", False),
            "meta_title": truncate(name, 255),
            "meta_description": truncate(data.get("description") or name, 160),
            "category_id": category_id,
        }, data.get("images") or [])
        logger.info("Producto creado", product_id=str(product.id), sku=sku)
        return product

    def get_product(self, db: Session, product_id: UUID) -> Product:
        product = self.product_repo.get_with_relations(db, product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def get_product_by_slug(self, db: Session, slug: str) -> Product:
        product = self.product_repo.get_by_slug(db, slug)
        if not product:
            raise NotFoundError(f"Product '{slug}' not found")
        return product

    def update_product(self, db: Session, product_id: UUID, changes: Dict[str, Any]) -> Product:
        """Actualización parcial; renombrar regenera el slug"""
        product = self.get_product(db, product_id)
        update_data: Dict[str, Any] = {}

        if changes.get("sku") is not None:
            sku = changes["sku"].strip()
            if not sku:
                raise ValidationError("Product SKU cannot be empty")
            if self.product_repo.sku_exists(db, sku, exclude_id=product.id):
                raise ConflictError(f"Product with SKU \"{sku}\" already exists")
            update_data["sku"] = sku

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise ValidationError("Product name cannot be empty")
            slug = self._product_slug(name, update_data.get("sku", product.sku))
            if self.product_repo.slug_exists(db, slug, exclude_id=product.id):
                raise ConflictError(f"Product with slug \"{slug}\" already exists")
            update_data["name"] = name
            update_data["slug"] = slug
            update_data["meta_title"] = truncate(name, 255)

        if "compatible_models" in changes:
            update_data["compatible_models"] = self._encode_models(changes["compatible_models"])

        if changes.get("category_id") is not None or changes.get("category_name"):
            model_context = (
                update_data.get("compatible_models") or product.compatible_models
                or settings.IMPORT_DEFAULT_MODEL
            ).split(",")[0]
            update_data["category_id"] = self._resolve_category_id(
                db, changes.get("category_id"), changes.get("category_name"), model_context
            )

        for field in NULLABLE_FIELDS:
            if field in changes:
                update_data[field] = changes[field]
        for field in REQUIRED_FIELDS:
            if changes.get(field) is not None:
                update_data[field] = changes[field]

        if changes.get("images") is not None:
            self.product_repo.replace_images(
                product, changes["images"], name=update_data.get("name", product.name)
            )

        product = self.product_repo.update(db, db_obj=product, obj_in=update_data)
        logger.info("Producto actualizado", product_id=str(product.id), fields=sorted(update_data))
        return product

    def delete_product(self, db: Session, product_id: UUID) -> None:
        """Eliminar producto e imágenes en una sola transacción"""
        product = self.get_product(db, product_id)
        image_count = len(product.images)
        self.product_repo.remove_with_images(db, product)
        logger.info("Producto eliminado", product_id=str(product_id), images=image_count)

    def list_products(
        self,
        db: Session,
        category_id: Optional[UUID] = None,
        exclude_id: Optional[UUID] = None,
        limit: Optional[int] = None
    ) -> Dict[str, Any]:
        products = self.product_repo.list_active(db, category_id, exclude_id, limit)
        return {
            "products": [serialize_product(p) for p in products],
            "total": len(products),
        }

    def search_products(
        self,
        db: Session,
        query: str,
        sort: str = "relevance",
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        categories: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """Búsqueda por texto con filtros de precio y categoría"""
        if sort not in SORT_OPTIONS:
            raise ValidationError(f"Unknown sort '{sort}'. Allowed: {', '.join(SORT_OPTIONS)}")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("min_price must not exceed max_price")

        categories = [c for c in (categories or []) if c]
        products: List[Product] = []
        if query.strip():
            products = self.product_repo.search_products(
                db, query, min_price, max_price, categories, sort, settings.SEARCH_RESULT_LIMIT
            )
        return {
            "products": [serialize_product(p) for p in products],
            "total": len(products),
            "query": query,
            "filters": {
                "categories": categories,
                "price_range": [min_price, max_price],
                "sort": sort,
            },
        }


# Instancia global del servicio
product_service = ProductService()

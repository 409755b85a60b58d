"""
Repositorio de productos con búsqueda
"""
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.models.category import Category
from app.models.product import Product, ProductImage
from app.repositories.base_repository import BaseRepository
from app.utils.text import sanitize_text

SORT_OPTIONS = {
    "price-low": (Product.price.asc(),),
    "price-high": (Product.price.desc(),),
    "newest": (Product.created_at.desc(),),
    "name": (Product.name.asc(),),
    "relevance": (Product.created_at.desc(),),
}


class ProductRepository(BaseRepository[Product, dict, dict]):
    """Repositorio de productos con funcionalidades específicas"""

    def __init__(self):
        super().__init__(Product)

    def get_with_relations(self, db: Session, product_id: UUID) -> Optional[Product]:
        """Producto con categoría e imágenes cargadas"""
        return (
            db.query(Product)
            .options(selectinload(Product.images), selectinload(Product.category))
            .filter(Product.id == product_id)
            .first()
        )

    def get_by_slug(self, db: Session, slug: str) -> Optional[Product]:
        return (
            db.query(Product)
            .options(selectinload(Product.images), selectinload(Product.category))
            .filter(Product.slug == slug)
            .first()
        )

    def sku_exists(self, db: Session, sku: str, exclude_id: Optional[UUID] = None) -> bool:
        query = db.query(Product.id).filter(Product.sku == sku)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def slug_exists(self, db: Session, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        query = db.query(Product.id).filter(Product.slug == slug)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def list_active(
        self,
        db: Session,
        category_id: Optional[UUID] = None,
        exclude_id: Optional[UUID] = None,
        limit: Optional[int] = None
    ) -> List[Product]:
        """Productos activos, más recientes primero"""
        query = db.query(Product).options(
            selectinload(Product.images), selectinload(Product.category)
        ).filter(Product.is_active == True)  # noqa: E712

        if category_id:
            query = query.filter(Product.category_id == category_id)
        if exclude_id:
            query = query.filter(Product.id != exclude_id)

        query = query.order_by(Product.created_at.desc(), Product.name)
        if limit:
            query = query.limit(limit)
        return query.all()

    def search_products(
        self,
        db: Session,
        search_term: str,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        category_names: Optional[Sequence[str]] = None,
        sort: str = "relevance",
        limit: int = 50
    ) -> List[Product]:
        """
        Búsqueda por subcadena (sin distinguir mayúsculas) en nombre,
        descripción, SKU y modelos compatibles
        """
        search_term = sanitize_text(search_term)
        if not search_term:
            return []

        pattern = f"%{search_term}%"
        query = db.query(Product).options(
            selectinload(Product.images), selectinload(Product.category)
        ).filter(
            Product.is_active == True,  # noqa: E712
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
                Product.compatible_models.ilike(pattern),
            ),
        )

        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)
        if category_names:
            query = query.join(Category).filter(Category.name.in_(list(category_names)))

        query = query.order_by(*SORT_OPTIONS.get(sort, SORT_OPTIONS["relevance"]))
        return query.limit(limit).all()

    @staticmethod
    def replace_images(product: Product, image_urls: Sequence[str], name: Optional[str] = None) -> None:
        """Sustituir las imágenes del producto (las anteriores quedan huérfanas y se borran)"""
        name = name or product.name
        product.images = [
            ProductImage(
                url=url,
                sort_order=index,
                alt_text=f"{name} - Image {index + 1}",
            )
            for index, url in enumerate(image_urls)
        ]

    def create_with_images(
        self, db: Session, data: Dict[str, Any], image_urls: Sequence[str] = ()
    ) -> Product:
        """Crear producto e imágenes en una única transacción"""
        product = self.create(db, obj_in=data, commit=False)
        if image_urls:
            self.replace_images(product, image_urls)
        self.commit(db, product)
        return product

    def remove_with_images(self, db: Session, product: Product) -> None:
        """Eliminar imágenes y producto en la misma transacción"""
        for image in list(product.images):
            db.delete(image)
        db.delete(product)
        self.commit(db)


# Instancia global del repositorio
product_repository = ProductRepository()

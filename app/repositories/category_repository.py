"""
Repositorio de categorías
"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.product import Product
from app.repositories.base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category, dict, dict]):
    """Repositorio de categorías con consultas sobre el árbol"""

    def __init__(self):
        super().__init__(Category)

    @staticmethod
    def _scope(query, parent_id: Optional[UUID]):
        if parent_id is None:
            return query.filter(Category.parent_id.is_(None))
        return query.filter(Category.parent_id == parent_id)

    def get_all_ordered(self, db: Session) -> List[Category]:
        """Todas las categorías en orden de almacenamiento (sort_order, nombre)"""
        return db.query(Category).order_by(
            Category.sort_order, Category.name, Category.created_at
        ).all()

    def get_by_name(
        self, db: Session, name: str, parent_id: Optional[UUID] = None, any_scope: bool = False
    ) -> Optional[Category]:
        """Coincidencia exacta de nombre, en un ámbito de padre o en todo el árbol"""
        query = db.query(Category).filter(Category.name == name)
        if not any_scope:
            query = self._scope(query, parent_id)
        return query.order_by(Category.sort_order, Category.name).first()

    def get_by_slug(self, db: Session, slug: str, parent_id: Optional[UUID] = None) -> Optional[Category]:
        return self._scope(db.query(Category).filter(Category.slug == slug), parent_id).first()

    def find_sibling_conflict(
        self,
        db: Session,
        name: str,
        slug: str,
        parent_id: Optional[UUID],
        exclude_id: Optional[UUID] = None
    ) -> Optional[Category]:
        """Hermana con el mismo nombre o slug bajo el mismo padre"""
        query = self._scope(
            db.query(Category).filter(or_(Category.name == name, Category.slug == slug)),
            parent_id,
        )
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def find_name_conflict(
        self, db: Session, name: str, slug: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Category]:
        """Cualquier categoría del árbol con el mismo nombre o slug"""
        query = db.query(Category).filter(or_(Category.name == name, Category.slug == slug))
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def get_children(self, db: Session, parent_id: UUID) -> List[Category]:
        return db.query(Category).filter(Category.parent_id == parent_id).order_by(
            Category.sort_order, Category.name
        ).all()

    def max_sibling_sort_order(self, db: Session, parent_id: Optional[UUID]) -> Optional[int]:
        """Mayor sort_order entre las hijas de un padre (None si no hay)"""
        return self._scope(db.query(func.max(Category.sort_order)), parent_id).scalar()

    def max_sort_order(self, db: Session) -> Optional[int]:
        return db.query(func.max(Category.sort_order)).scalar()

    def count_direct_products(self, db: Session, category_id: UUID) -> int:
        return db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar() or 0

    def get_all_with_direct_counts(self, db: Session) -> List[Tuple[Category, int]]:
        """
        Una sola consulta: todas las categorías con su número de productos directos
        """
        return (
            db.query(Category, func.count(Product.id))
            .outerjoin(Product, Product.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.sort_order, Category.name)
            .all()
        )

    def delete_all(self, db: Session) -> int:
        """Eliminar todas las categorías (sin confirmar la transacción)"""
        db.query(Category).update({Category.parent_id: None}, synchronize_session=False)
        return db.query(Category).delete(synchronize_session=False)


# Instancia global del repositorio
category_repository = CategoryRepository()

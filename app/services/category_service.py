"""
Servicio de categorías: árbol de 3 niveles, conteos agregados y CRUD
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.category import Category
from app.repositories.category_repository import category_repository
from app.repositories.product_repository import product_repository
from app.utils.category_tree import CategoryCount, aggregate_product_counts, build_tree
from app.utils.text import slugify

logger = structlog.get_logger(__name__)


def serialize_category(category: Category) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "level": category.level,
        "parent_id": category.parent_id,
        "sort_order": category.sort_order,
        "is_active": category.is_active,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }


class CategoryService:
    """Servicio de categorías con validación de invariantes del árbol"""

    def __init__(self):
        self.category_repo = category_repository
        self.product_repo = product_repository

    def create_category(
        self,
        db: Session,
        name: str,
        description: Optional[str] = None,
        parent_id: Optional[UUID] = None,
        level: Optional[int] = None,
        is_active: bool = True,
        sort_order: Optional[int] = None
    ) -> Category:
        """
        Crear categoría.

        El nivel se recalcula como ``padre.level + 1`` cuando hay padre y es 1
        en caso contrario. Sin ``sort_order`` explícito se usa el mayor orden
        entre hermanas + 1.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")

        max_level = settings.CATEGORY_MAX_LEVEL
        if level is not None and not 1 <= level <= max_level:
            raise ValidationError(f"Category level must be between 1 and {max_level}")

        if parent_id is not None:
            parent = self.category_repo.get(db, parent_id)
            if not parent:
                raise ValidationError(f"Parent category {parent_id} does not exist")
            level = parent.level + 1
            if level > max_level:
                raise ValidationError(
                    f"Category '{name}' would be at level {level}; maximum is {max_level}"
                )
        else:
            level = 1

        slug = slugify(name)
        if not slug:
            raise ValidationError("Category name must contain letters or digits")

        if self.category_repo.find_sibling_conflict(db, name, slug, parent_id):
            raise ConflictError(f"Category '{name}' already exists at this level")

        if sort_order is None:
            sort_order = (self.category_repo.max_sibling_sort_order(db, parent_id) or 0) + 1

        category = self.category_repo.create(db, obj_in={
            "name": name,
            "slug": slug,
            "description": description.strip() if description and description.strip() else None,
            "level": level,
            "parent_id": parent_id,
            "sort_order": sort_order,
            "is_active": is_active,
        })
        logger.info(
            "Categoría creada",
            category_id=str(category.id), name=name, level=level, sort_order=sort_order,
        )
        return category

    def get_category(self, db: Session, category_id: UUID) -> Category:
        category = self.category_repo.get(db, category_id)
        if not category:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    def update_category(self, db: Session, category_id: UUID, changes: Dict[str, Any]) -> Category:
        """Actualización parcial; renombrar regenera el slug"""
        category = self.get_category(db, category_id)
        update_data: Dict[str, Any] = {}

        if "name" in changes and changes["name"] is not None:
            name = changes["name"].strip()
            if not name:
                raise ValidationError("Category name cannot be empty")
            slug = slugify(name)
            if not slug:
                raise ValidationError("Category name must contain letters or digits")
            # al renombrar se compara contra todo el árbol, no solo las hermanas
            duplicate = self.category_repo.find_name_conflict(
                db, name, slug, exclude_id=category.id
            )
            if duplicate:
                raise ConflictError("Another category with this name already exists")
            update_data["name"] = name
            update_data["slug"] = slug

        if "description" in changes:
            description = changes["description"]
            update_data["description"] = description.strip() if description and description.strip() else None

        for field in ("is_active", "sort_order"):
            if changes.get(field) is not None:
                update_data[field] = changes[field]

        category = self.category_repo.update(db, db_obj=category, obj_in=update_data)
        logger.info("Categoría actualizada", category_id=str(category.id), fields=sorted(update_data))
        return category

    def delete_category(self, db: Session, category_id: UUID) -> None:
        """
        Eliminar categoría sin productos directos.

        Las hijas pasan al padre de la categoría eliminada y todo su subárbol
        sube un nivel.
        """
        category = self.get_category(db, category_id)

        product_count = self.category_repo.count_direct_products(db, category.id)
        if product_count > 0:
            raise ConflictError(
                f"Cannot delete category with {product_count} products. "
                "Move products to another category first.",
                details={"product_count": product_count},
            )

        children = self.category_repo.get_children(db, category.id)
        for child in children:
            clash = self.category_repo.find_sibling_conflict(
                db, child.name, child.slug, category.parent_id, exclude_id=category.id
            )
            if clash:
                raise ConflictError(
                    f"Cannot promote child category '{child.name}': "
                    "a category with that name already exists one level up"
                )

        for child in children:
            child.parent_id = category.parent_id
            self._shift_subtree(db, child, -1)
        # las hijas deben quedar reasignadas antes de borrar al padre
        db.flush()

        db.delete(category)
        self.category_repo.commit(db)
        logger.info(
            "Categoría eliminada",
            category_id=str(category_id), promoted_children=len(children),
        )

    def _shift_subtree(self, db: Session, category: Category, delta: int) -> None:
        category.level += delta
        for child in self.category_repo.get_children(db, category.id):
            self._shift_subtree(db, child, delta)

    def list_with_counts(self, db: Session) -> List[Dict[str, Any]]:
        """
        Todas las categorías con conteo directo y agregado.

        Una sola consulta trae categorías y conteos directos; la agregación
        se hace en memoria.
        """
        rows = self.category_repo.get_all_with_direct_counts(db)
        totals = aggregate_product_counts(
            (CategoryCount(c.id, c.parent_id, count) for c, count in rows),
            max_depth=settings.CATEGORY_MAX_DEPTH_GUARD,
        )
        result = []
        for category, direct_count in rows:
            data = serialize_category(category)
            data["direct_product_count"] = direct_count
            data["product_count"] = totals[category.id]
            result.append(data)
        return result

    def get_tree(self, db: Session) -> List[Dict[str, Any]]:
        """Categorías anidadas con conteos"""
        return build_tree(self.list_with_counts(db))

    def get_with_counts(self, db: Session, category_id: UUID) -> Dict[str, Any]:
        for item in self.list_with_counts(db):
            if item["id"] == category_id:
                return item
        raise NotFoundError(f"Category {category_id} not found")

    def setup_hierarchy(self, db: Session, hierarchy: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crear una jerarquía anidada ``{name, description, children}``.

        Los nodos existentes (mismo nombre bajo el mismo padre) se omiten pero
        sus hijos se siguen procesando. Un fallo en un nodo no detiene al resto.
        """
        stats = {"created": 0, "skipped": 0, "errors": []}
        sort_order = (self.category_repo.max_sort_order(db) or 0) + 1

        def visit(node: Dict[str, Any], parent_id: Optional[UUID]) -> None:
            nonlocal sort_order
            name = (node.get("name") or "").strip()
            existing = self.category_repo.get_by_name(db, name, parent_id) if name else None

            if existing:
                stats["skipped"] += 1
                logger.debug("Categoría existente omitida", name=name)
                category = existing
            else:
                try:
                    category = self.create_category(
                        db,
                        name=name,
                        description=node.get("description"),
                        parent_id=parent_id,
                        sort_order=sort_order,
                    )
                except (ValidationError, ConflictError) as exc:
                    message = f"Failed to create \"{name}\": {exc.message}"
                    logger.warning("Error creando nodo de jerarquía", name=name, error=exc.message)
                    stats["errors"].append(message)
                    return
                sort_order += 1
                stats["created"] += 1

            for child in node.get("children") or []:
                visit(child, category.id)

        visit(hierarchy, None)
        logger.info(
            "Jerarquía procesada",
            created=stats["created"], skipped=stats["skipped"], errors=len(stats["errors"]),
        )
        return stats

    def clean_all(self, db: Session) -> int:
        """Eliminar todas las categorías; solo permitido si no hay productos"""
        product_count = self.product_repo.count(db)
        if product_count > 0:
            raise ConflictError(
                f"Cannot delete categories while {product_count} products exist. "
                "Delete products first or they will become orphaned.",
                details={"product_count": product_count},
            )
        deleted = self.category_repo.delete_all(db)
        self.category_repo.commit(db)
        logger.info("Categorías eliminadas", deleted=deleted)
        return deleted


# Instancia global del servicio
category_service = CategoryService()

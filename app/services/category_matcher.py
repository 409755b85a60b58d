"""
Resolución de etiquetas de categoría provenientes de hojas de importación

Orden de resolución (gana la primera coincidencia):

1. nombre exacto (sensible a mayúsculas) en cualquier nivel
2. subcadena: primero una categoría cuyo nombre contiene la etiqueta, en el
   orden de almacenamiento (sort_order, nombre); si no hay, la categoría de
   nombre más largo contenido en la etiqueta
3. creación de una categoría raíz nueva con sort_order fijo
4. si la creación falla, la categoría "Uncategorized" (creada al primer uso)
"""
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, ValidationError
from app.models.category import Category
from app.repositories.category_repository import category_repository
from app.services.category_service import category_service
from app.utils.compatible_models import model_label
from app.utils.text import slugify

logger = structlog.get_logger(__name__)


@dataclass
class MatchResult:
    category: Category
    created: bool = False
    strategy: str = "exact"

    @property
    def category_id(self):
        return self.category.id


class CategoryMatcher:
    """Resuelve (o crea) la categoría de una fila importada"""

    def __init__(self):
        self.category_repo = category_repository
        self.category_service = category_service

    def resolve(self, db: Session, label: Optional[str], model_context: str) -> MatchResult:
        """
        Resolver una etiqueta libre a una categoría existente o nueva.

        Args:
            label: nombre de categoría/subcategoría tal como viene en la hoja
            model_context: tag de modelo del lote (p. ej. MODEL_3) usado en la
                descripción de categorías creadas automáticamente
        """
        label = (label or "").strip()
        if not label:
            return self._uncategorized(db)

        exact = self.category_repo.get_by_name(db, label, any_scope=True)
        if exact:
            return MatchResult(exact, strategy="exact")

        partial = self._first_containing(db, label)
        if partial:
            logger.debug("Categoría resuelta por subcadena", label=label, category=partial.name)
            return MatchResult(partial, strategy="substring")

        try:
            created = self.category_service.create_category(
                db,
                name=label,
                description=f"Auto-created category for {label} ({self._context_label(model_context)})",
                sort_order=settings.AUTO_CATEGORY_SORT_ORDER,
            )
            logger.info("Categoría creada automáticamente", label=label, category_id=str(created.id))
            return MatchResult(created, created=True, strategy="created")
        except ConflictError:
            # otro escritor creó la categoría entre la búsqueda y el insert
            existing = (
                self.category_repo.get_by_name(db, label)
                or self.category_repo.get_by_slug(db, slugify(label))
            )
            if existing:
                return MatchResult(existing, strategy="exact")
            logger.warning("No se pudo crear categoría", label=label)
        except ValidationError as exc:
            logger.warning("Etiqueta de categoría inválida", label=label, error=exc.message)

        return self._uncategorized(db)

    def _first_containing(self, db: Session, label: str) -> Optional[Category]:
        ordered = self.category_repo.get_all_ordered(db)
        for category in ordered:
            if label in category.name:
                return category
        # sentido inverso: la etiqueta contiene el nombre; gana el nombre más largo
        contained = [c for c in ordered if c.name in label]
        if not contained:
            return None
        return max(contained, key=lambda c: len(c.name))

    def _uncategorized(self, db: Session) -> MatchResult:
        name = settings.UNCATEGORIZED_NAME
        existing = self.category_repo.get_by_name(db, name)
        if existing:
            return MatchResult(existing, strategy="fallback")
        try:
            created = self.category_service.create_category(
                db,
                name=name,
                description="Products without specific categories",
                sort_order=settings.AUTO_CATEGORY_SORT_ORDER,
            )
        except ConflictError:
            existing = self.category_repo.get_by_slug(db, slugify(name))
            if existing is None:
                raise
            return MatchResult(existing, strategy="fallback")
        logger.info("Categoría por defecto creada", category_id=str(created.id))
        return MatchResult(created, created=True, strategy="fallback")

    @staticmethod
    def _context_label(model_context: str) -> str:
        try:
            return model_label(model_context)
        except ValueError:
            return model_context


# Instancia global del matcher
category_matcher = CategoryMatcher()

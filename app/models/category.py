"""
Modelo de categorías de productos (árbol de 3 niveles)
"""
from sqlalchemy import (
    Column, String, Text, Boolean, ForeignKey, DateTime, Integer, Uuid,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.core.database import Base


class Category(Base):
    """Modelo de categoría: 1 = raíz, 2 = principal, 3 = subcategoría"""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("parent_id", "name", name="uq_categories_parent_name"),
        UniqueConstraint("parent_id", "slug", name="uq_categories_parent_slug"),
        CheckConstraint("level >= 1 AND level <= 3", name="ck_categories_level"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(120), nullable=False, index=True)
    description = Column(Text)
    level = Column(Integer, nullable=False, default=1)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relaciones
    parent = relationship("Category", remote_side=[id], backref="children")
    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}', level={self.level})>"
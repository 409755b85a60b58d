"""
Modelos de productos e imágenes de producto
"""
from sqlalchemy import (
    Column, String, Text, Boolean, ForeignKey, DateTime, Integer, Numeric, Float,
    Uuid, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.core.database import Base


class Product(Base):
    """Modelo de producto (repuesto compatible con vehículos Tesla)"""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sku = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)
    short_description = Column(String(100))
    price = Column(Numeric(10, 2), nullable=False)
    compare_at_price = Column(Numeric(10, 2))
    stock_quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    track_quantity = Column(Boolean, nullable=False, default=True)
    compatible_models = Column(String(100))  # MODEL_3,MODEL_Y
    weight = Column(Float)
    dimensions = Column(String(100))
    is_active = Column(Boolean, default=True, index=True)
    is_featured = Column(Boolean, default=False, index=True)
    meta_title = Column(String(255))
    meta_description = Column(String(160))
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relaciones
    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        order_by="ProductImage.sort_order",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}', name='{self.name}')>"

    @property
    def model_list(self):
        """Modelos compatibles como lista"""
        if not self.compatible_models:
            return []
        return [m.strip() for m in self.compatible_models.split(",") if m.strip()]

    @property
    def is_low_stock(self):
        return self.track_quantity and self.stock_quantity <= self.low_stock_threshold


class ProductImage(Base):
    """Imagen de producto ordenada por índice explícito"""

    __tablename__ = "product_images"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)
    url = Column(String(500), nullable=False)
    alt_text = Column(String(255))
    sort_order = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="images")

    def __repr__(self):
        return f"<ProductImage(id={self.id}, product_id={self.product_id}, sort_order={self.sort_order})>"

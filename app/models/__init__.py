"""
Modelos del catálogo de repuestos Tesla
"""
from .category import Category
from .product import Product, ProductImage

# Exportar todos los modelos
__all__ = ["Category", "Product", "ProductImage"]

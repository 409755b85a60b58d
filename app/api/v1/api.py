"""Router principal de la API v1"""
from fastapi import APIRouter

from app.api.v1.endpoints import categories, products

api_router = APIRouter()

# Incluir routers de endpoints
api_router.include_router(
    categories.router,
    prefix="/categories",
    tags=["Categorías"]
)

api_router.include_router(
    products.router,
    prefix="/products",
    tags=["Productos"]
)

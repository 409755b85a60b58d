"""
Configuración de tests para el catálogo de repuestos
"""
import os
import sys
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# URL de base de datos de test
TEST_DATABASE_URL = "sqlite:///./test.db"

# Variables de entorno antes de importar la aplicación
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ.pop("REDIS_URL", None)

# Agregar el directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.main import app  # noqa: E402
from app.core.database import get_db, Base  # noqa: E402

# Crear engine de test
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

# Crear session de test
TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=test_engine
)


def override_get_db():
    """Override de la dependencia de base de datos para tests"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override de la dependencia
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="session")
def test_app():
    """Fixture de la aplicación FastAPI para tests"""
    return app


@pytest.fixture(scope="function")
def db_session():
    """Fixture de sesión de base de datos para cada test"""
    from app.models import category, product  # noqa: F401

    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        # Limpiar tablas después de cada test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def client(test_app, db_session):
    """Fixture del cliente de test (tablas creadas por db_session)"""
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def sample_category(db_session):
    """Fixture de categoría raíz de ejemplo"""
    from app.models.category import Category

    category = Category(
        name="Brakes",
        slug="brakes",
        description="Brake pads, rotors and calipers",
        level=1,
        sort_order=1,
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_subcategory(db_session, sample_category):
    """Fixture de subcategoría (nivel 2) bajo sample_category"""
    from app.models.category import Category

    category = Category(
        name="Brake Pads",
        slug="brake-pads",
        level=2,
        parent_id=sample_category.id,
        sort_order=1,
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_product(db_session, sample_category):
    """Fixture de producto de ejemplo"""
    from app.models.product import Product, ProductImage

    product = Product(
        sku="BP-M3-FRONT",
        name="Front Brake Pad Set",
        slug="front-brake-pad-set",
        description="Ceramic front brake pads",
        short_description="Front Brake Pad Set",
        price=Decimal("49.99"),
        stock_quantity=8,
        low_stock_threshold=5,
        compatible_models="MODEL_3,MODEL_Y",
        category_id=sample_category.id,
        images=[ProductImage(url="https://cdn.test/bp-front.jpg", alt_text="Front Brake Pad Set - Image 1")],
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


# Utilidades para tests
class TestUtils:
    """Utilidades para tests"""

    @staticmethod
    def create_test_uuid():
        """Crear UUID de test"""
        import uuid
        return uuid.uuid4()

    @staticmethod
    def assert_response_success(response, expected_status=200):
        """Verificar que la respuesta sea exitosa"""
        assert response.status_code == expected_status
        if response.headers.get("content-type", "").startswith("application/json"):
            data = response.json()
            if isinstance(data, dict) and "success" in data:
                assert data["success"] is True

    @staticmethod
    def assert_response_error(response, expected_status=400):
        """Verificar que la respuesta sea de error con el formato común"""
        assert response.status_code == expected_status
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == expected_status
        return data["error"]


def pytest_unconfigure(config):
    """Limpieza después de tests"""
    # Limpiar archivo de base de datos de test
    if os.path.exists("./test.db"):
        os.remove("./test.db")

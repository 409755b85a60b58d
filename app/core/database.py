"""
Configuración de base de datos para el catálogo
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, MetaData, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
import structlog

from app.core.config import settings
from app.core.exceptions import CatalogError

logger = structlog.get_logger(__name__)


def build_engine(database_url: str, **kwargs):
    """Crear engine con argumentos de conexión según el motor"""
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            **kwargs,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=10,
        max_overflow=20,
        **kwargs,
    )


# Configuración del engine de base de datos
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Configuración de sesiones
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Configuración de metadatos
metadata = MetaData()

# Base para modelos
Base = declarative_base(metadata=metadata)


def get_db():
    """
    Dependency para obtener sesión de base de datos (FastAPI)
    """
    db = SessionLocal()
    try:
        yield db
    except CatalogError:
        db.rollback()
        raise
    except Exception:
        logger.exception("Error en sesión de base de datos")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Sesión transaccional para scripts y tareas fuera de FastAPI

    Yields:
        Session: Sesión de SQLAlchemy, confirmada al salir sin errores
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        logger.exception("Error en sesión transaccional")
        db.rollback()
        raise
    finally:
        db.close()


def create_database(bind=None):
    """
    Crear todas las tablas en la base de datos
    """
    try:
        # Importar todos los modelos para asegurar que estén registrados
        from app.models import category, product  # noqa: F401

        Base.metadata.create_all(bind=bind or engine)
        logger.info("Tablas de base de datos creadas exitosamente")
    except Exception:
        logger.exception("Error creando tablas")
        raise


def check_database_connection():
    """
    Verificar conexión a la base de datos
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("Conexión a base de datos exitosa")
        return True
    except Exception:
        logger.exception("Error conectando a base de datos")
        return False

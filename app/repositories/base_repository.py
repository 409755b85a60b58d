"""
Repositorio base para operaciones CRUD comunes
"""
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from app.core.database import Base
from app.core.exceptions import ConflictError, PersistenceError

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = structlog.get_logger(__name__)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Repositorio base con operaciones CRUD comunes"""

    def __init__(self, model: Type[ModelType]):
        """
        Repositorio CRUD con modelo por defecto.

        **Parámetros**
        * `model`: Clase del modelo SQLAlchemy
        """
        self.model = model

    def get(self, db: Session, id: Union[UUID, str]) -> Optional[ModelType]:
        """Obtener registro por ID"""
        return db.get(self.model, id)

    def create(
        self,
        db: Session,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """Crear nuevo registro"""
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        if commit:
            self.commit(db, db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """Actualizar registro existente"""
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        if commit:
            self.commit(db, db_obj)
        return db_obj

    def count(self, db: Session, filters: Optional[Dict[str, Any]] = None) -> int:
        """Contar registros con filtros opcionales"""
        query = db.query(self.model)

        if filters:
            for key, value in filters.items():
                if hasattr(self.model, key) and value is not None:
                    query = query.filter(getattr(self.model, key) == value)

        return query.count()

    def exists(self, db: Session, id: Union[UUID, str]) -> bool:
        """Verificar si existe un registro por ID"""
        return db.query(self.model).filter(self.model.id == id).first() is not None

    def commit(self, db: Session, db_obj: Optional[ModelType] = None) -> None:
        """
        Confirmar la transacción traduciendo errores del ORM a errores de dominio.

        IntegrityError -> ConflictError; cualquier otro error de SQLAlchemy ->
        PersistenceError (el detalle solo queda en logs).
        """
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning("Conflicto de integridad", model=self.model.__name__, error=str(e.orig))
            raise ConflictError(
                f"{self.model.__name__} violates a uniqueness or integrity constraint"
            ) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Error de persistencia", model=self.model.__name__)
            raise PersistenceError(PersistenceError.public_message) from e
        if db_obj is not None:
            db.refresh(db_obj)

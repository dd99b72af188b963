from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from sqlalchemy.orm import Session
from pydantic import BaseModel
import math

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def paginate(items: List[Any], total: int, skip: int, limit: int) -> Dict[str, Any]:
    """Wrap a page of items with pagination metadata"""
    total_pages = math.ceil(total / limit) if limit > 0 else 1
    current_page = (skip // limit) + 1 if limit > 0 else 1

    return {
        "items": items,
        "total": total,
        "page": current_page,
        "pages": total_pages,
        "per_page": limit,
        "has_next": current_page < total_pages,
        "has_prev": current_page > 1
    }


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to Create, Read, Update, Delete (CRUD).

        Methods flush but never commit; the service layer owns the transaction.
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """Get a single record by ID"""
        return db.query(self.model).filter(self.model.id == id).first()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """Create a new record"""
        obj_in_data = obj_in.model_dump() if isinstance(obj_in, BaseModel) else dict(obj_in)
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    def create_bulk(self, db: Session, *, objs_in: List[Union[CreateSchemaType, Dict[str, Any]]]) -> List[ModelType]:
        """Create multiple records in one flush"""
        db_objs = []
        for obj_in in objs_in:
            obj_in_data = obj_in.model_dump() if isinstance(obj_in, BaseModel) else dict(obj_in)
            db_objs.append(self.model(**obj_in_data))

        db.add_all(db_objs)
        db.flush()
        for db_obj in db_objs:
            db.refresh(db_obj)
        return db_objs

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """Update an existing record with the fields actually supplied"""
        obj_data = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else obj_in

        for field, value in obj_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    def update_many(self, db: Session, *, ids: List[int], values: Dict[str, Any]) -> int:
        """Apply the same values to every record in ids with a single UPDATE"""
        values = {field: value for field, value in values.items() if hasattr(self.model, field)}
        if not ids or not values:
            return 0
        count = (
            db.query(self.model)
            .filter(self.model.id.in_(ids))
            .update(values, synchronize_session="fetch")
        )
        db.flush()
        return count

    def delete(self, db: Session, *, id: int) -> Optional[ModelType]:
        """Delete a record by ID; returns None when it does not exist"""
        obj = db.get(self.model, id)
        if obj is None:
            return None
        db.delete(obj)
        db.flush()
        return obj

    def get_by_field(self, db: Session, field: str, value: Any) -> Optional[ModelType]:
        """Get a record by any field"""
        if not hasattr(self.model, field):
            return None
        return db.query(self.model).filter(getattr(self.model, field) == value).first()


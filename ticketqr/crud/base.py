from typing import TypeVar, Generic, Type
from sqlalchemy.orm import Session
from ticketqr.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

class CRUDBase(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]): self.model = model

    def add(self, db: Session, obj: ModelType) -> ModelType:
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

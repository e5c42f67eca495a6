from typing import Type, TypeVar, Optional
from sqlalchemy.orm import Session, Query

from utils.exceptions import NotFoundError

ModelType = TypeVar('ModelType')


class BaseService:
    """Tenant-scoped lookups shared by the guest, room and reservation services."""

    def __init__(self, model: Type[ModelType], label: str = None):
        self.model = model
        self.label = label or model.__name__

    def query(self, db: Session, tenant_id: int) -> Query:
        return db.query(self.model).filter(self.model.tenant_id == tenant_id)

    def get(self, db: Session, tenant_id: int, id: int) -> Optional[ModelType]:
        return self.query(db, tenant_id).filter(self.model.id == id).first()

    def get_or_404(self, db: Session, tenant_id: int, id: int) -> ModelType:
        db_obj = self.get(db, tenant_id, id)
        if db_obj is None:
            raise NotFoundError(f"{self.label} {id} not found")
        return db_obj

    def count(self, db: Session, tenant_id: int) -> int:
        return self.query(db, tenant_id).count()

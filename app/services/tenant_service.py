from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database.init import atomic
from database.models import Tenant
from schemas.tenant_schema import TenantCreate, TenantUpdate
from utils.exceptions import ConflictError, InternalError, NotFoundError


def create_tenant(db: Session, tenant: TenantCreate) -> Tenant:
    db_tenant = Tenant(
        name=tenant.name,
        membership=tenant.membership.value,
        status=tenant.status.value,
    )
    try:
        with atomic(db):
            db.add(db_tenant)
        db.refresh(db_tenant)
    except SQLAlchemyError as e:
        raise InternalError(f"Unable to create Tenant. Message: {e}")
    return db_tenant


def get_tenants(db: Session) -> List[Tenant]:
    return db.query(Tenant).order_by(Tenant.id).all()


def get_tenant_by_id(db: Session, tenant_id: int) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise NotFoundError(f"Tenant: {tenant_id} not found")
    return tenant


def update_tenant(db: Session, tenant_id: int, tenant_in: TenantUpdate) -> Tenant:
    tenant = get_tenant_by_id(db, tenant_id)
    try:
        with atomic(db):
            for field, value in tenant_in.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(tenant, field, getattr(value, "value", value))
        db.refresh(tenant)
    except SQLAlchemyError as e:
        raise InternalError(f"Unable to update Tenant: {tenant_id}. Message: {e}")
    return tenant


def delete_tenant(db: Session, tenant_id: int) -> None:
    """Removes the tenant row only; nothing it owns is cleaned up."""
    tenant = get_tenant_by_id(db, tenant_id)
    try:
        with atomic(db):
            db.query(Tenant).filter(Tenant.id == tenant.id).delete(synchronize_session=False)
        db.expire_all()
    except IntegrityError as e:
        raise ConflictError(f"Tenant: {tenant_id} still owns records. Message: {e.orig}")
    except SQLAlchemyError as e:
        raise InternalError(f"Unable to delete Tenant: {tenant_id}. Message: {e}")

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from enums.user_role import UserRole
from schemas.tenant_schema import TenantCreate, TenantResponse, TenantUpdate
from services import tenant_service
from utils.dependencies import require_roles
from utils.exceptions import AppError
from responses.success import created_response, data_response, success_response
from responses.error import error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tenants",
    tags=["Tenants"],
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)


def serialize(tenant) -> dict:
    return TenantResponse.model_validate(tenant).model_dump(mode="json")


@router.post("", response_model=TenantResponse)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db)):
    try:
        tenant = tenant_service.create_tenant(db, payload)
        return created_response(f"New Tenant: {tenant.id} successfully created", serialize(tenant))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Creating tenant failed")
        return internal_server_error(f"Unable to create Tenant. Message: {e}")


@router.get("")
def get_tenants(db: Session = Depends(get_db)):
    try:
        tenants = tenant_service.get_tenants(db)
        return data_response([serialize(t) for t in tenants], meta={"total": len(tenants)})
    except Exception as e:
        logger.exception("Listing tenants failed")
        return internal_server_error(f"Unable to retrieve Tenants. Message: {e}")


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(tenant_id: int, db: Session = Depends(get_db)):
    try:
        return data_response(serialize(tenant_service.get_tenant_by_id(db, tenant_id)))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Fetching tenant failed")
        return internal_server_error(str(e))


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(tenant_id: int, payload: TenantUpdate, db: Session = Depends(get_db)):
    try:
        tenant = tenant_service.update_tenant(db, tenant_id, payload)
        return success_response(f"Tenant: {tenant_id} successfully updated", serialize(tenant))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Updating tenant failed")
        return internal_server_error(str(e))


@router.delete("/{tenant_id}")
def delete_tenant(tenant_id: int, db: Session = Depends(get_db)):
    try:
        tenant_service.delete_tenant(db, tenant_id)
        return success_response(f"Tenant: {tenant_id} successfully deleted")
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Deleting tenant failed")
        return internal_server_error(str(e))

import logging

from sqlalchemy.orm import Session

from config import SUPERADMIN_EMAIL, SUPERADMIN_PASSWORD, SUPERADMIN_USERNAME
from database.init import atomic
from database.models import Tenant, User
from enums.user_role import UserRole
from enums.user_status import UserStatus
from utils.dependencies import hash_password

logger = logging.getLogger(__name__)

PLATFORM_TENANT_NAME = "Default"


def create_initial_data(db: Session):
    """Create the platform tenant and its SuperAdmin when configured and missing."""
    if not SUPERADMIN_USERNAME or not SUPERADMIN_PASSWORD:
        return None

    existing = db.query(User).filter(User.username == SUPERADMIN_USERNAME).first()
    if existing is not None:
        return existing

    with atomic(db):
        tenant = db.query(Tenant).filter(Tenant.name == PLATFORM_TENANT_NAME).first()
        if tenant is None:
            tenant = Tenant(name=PLATFORM_TENANT_NAME)
            db.add(tenant)
            db.flush()

        admin = User(
            tenant_id=tenant.id,
            username=SUPERADMIN_USERNAME,
            email=SUPERADMIN_EMAIL,
            role=UserRole.SUPER_ADMIN.value,
            status=UserStatus.ACTIVE.value,
            password=hash_password(SUPERADMIN_PASSWORD),
        )
        db.add(admin)

    logger.info("Created SuperAdmin %s in tenant %s", admin.username, tenant.id)
    return admin

import logging
import mimetypes
import os
from datetime import timedelta
from typing import List, Optional, Tuple

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import REGISTRATION_TOKEN_EXPIRE_HOURS, UPLOAD_DIR
from database.init import atomic
from database.models import Tenant, User
from enums.user_role import UserRole
from enums.user_status import UserStatus
from schemas.user_schema import UserCreate, UserUpdate
from services.auth_service import new_token
from utils.clock import utcnow
from utils.dependencies import is_super_admin
from utils.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from utils.pagination import PageParams

logger = logging.getLogger(__name__)

ADMIN_ROLES = {UserRole.SUPER_ADMIN.value, UserRole.ADMIN.value}


def _ensure_unique(db: Session, username: Optional[str], email: Optional[str], exclude_id: int = None):
    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)
    if not conditions:
        return

    query = db.query(User).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    existing = query.first()
    if existing:
        field = "username" if username and existing.username == username else "email"
        raise ConflictError(f"A user with this {field} already exists")


def create_user(payload: UserCreate, current_user: User, db: Session) -> Tuple[User, str]:
    """
    Invite a new user. The account has no password until the invitee follows
    the returned registration token.
    """
    tenant_id = current_user.tenant_id
    if is_super_admin(current_user):
        tenant_id = payload.tenant_id or current_user.tenant_id
    elif payload.tenant_id is not None and payload.tenant_id != current_user.tenant_id:
        raise ForbiddenError("Admins can only create users for their own tenant")

    if payload.role == UserRole.SUPER_ADMIN and not is_super_admin(current_user):
        raise ForbiddenError("Only a SuperAdmin can create SuperAdmin users")

    if db.query(Tenant).filter(Tenant.id == tenant_id).first() is None:
        raise NotFoundError(f"Tenant {tenant_id} not found")

    _ensure_unique(db, payload.username, payload.email)

    raw_token, digest = new_token()
    user = User(
        tenant_id=tenant_id,
        username=payload.username,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role.value,
        email=payload.email,
        phone_number=payload.phone_number,
        status=UserStatus.INVITED.value,
        reset_password_token=digest,
        reset_password_expires=utcnow() + timedelta(hours=REGISTRATION_TOKEN_EXPIRE_HOURS),
    )
    try:
        with atomic(db):
            db.add(user)
        db.refresh(user)
    except SQLAlchemyError as e:
        raise InternalError(f"Unable to create new user. Message: {e}")

    logger.info("Invited user %s (%s) to tenant %s", user.id, user.email, tenant_id)
    return user, raw_token


def list_users(current_user: User, params: PageParams, db: Session) -> Tuple[List[User], int]:
    query = db.query(User)
    if not is_super_admin(current_user):
        query = query.filter(User.tenant_id == current_user.tenant_id)
    total = query.count()
    users = query.order_by(User.id).offset(params.offset).limit(params.limit).all()
    return users, total


def get_user(user_id: int, current_user: User, db: Session) -> User:
    query = db.query(User).filter(User.id == user_id)
    if not is_super_admin(current_user):
        query = query.filter(User.tenant_id == current_user.tenant_id)
    user = query.first()
    if not user:
        raise NotFoundError(f"User: {user_id} not found")
    return user


def _ensure_can_edit(target: User, current_user: User):
    if target.id == current_user.id or is_super_admin(current_user):
        return
    if current_user.role == UserRole.ADMIN.value and target.tenant_id == current_user.tenant_id:
        return
    raise ForbiddenError("You are not allowed to update this user")


def update_user(user_id: int, payload: UserUpdate, current_user: User, db: Session) -> User:
    user = get_user(user_id, current_user, db)
    _ensure_can_edit(user, current_user)

    update_data = payload.model_dump(exclude_unset=True)
    if ("role" in update_data or "status" in update_data) and current_user.role not in ADMIN_ROLES:
        raise ForbiddenError("Only administrators can change roles or status")
    if update_data.get("role") == UserRole.SUPER_ADMIN and not is_super_admin(current_user):
        raise ForbiddenError("Only a SuperAdmin can grant the SuperAdmin role")

    _ensure_unique(db, update_data.get("username"), update_data.get("email"), exclude_id=user.id)

    try:
        with atomic(db):
            for field, value in update_data.items():
                if value is None:
                    continue
                if field in ("role", "status"):
                    value = value.value
                setattr(user, field, value)
        db.refresh(user)
    except SQLAlchemyError as e:
        raise InternalError(f"Unable to update User: {user_id}. Message: {e}")
    return user


def store_profile_picture(user_id: int, filename: str, content: bytes, current_user: User, db: Session) -> User:
    user = get_user(user_id, current_user, db)
    _ensure_can_edit(user, current_user)

    mime_type = mimetypes.guess_type(filename or "")[0]
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")

    directory = os.path.join(UPLOAD_DIR, "users", str(user.id))
    os.makedirs(directory, exist_ok=True)
    _, ext = os.path.splitext(filename)
    file_path = os.path.join(directory, f"profile{ext.lower()}")

    with open(file_path, "wb") as buffer:
        buffer.write(content)

    with atomic(db):
        user.profile_image = file_path.replace(os.sep, "/")
    db.refresh(user)
    return user


async def save_profile_picture(user_id: int, file: UploadFile, current_user: User, db: Session) -> User:
    content = await file.read()
    return await run_in_threadpool(
        store_profile_picture, user_id, file.filename, content, current_user, db
    )

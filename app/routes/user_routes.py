import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from config import CLIENT_URL
from database.init import get_db
from database.models import User
from enums.user_role import UserRole
from schemas.user_schema import (
    CompleteRegistrationRequest,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from services import auth_service, user_service
from services.email_service import EmailService
from utils.dependencies import get_current_user, require_roles
from utils.exceptions import AppError
from utils.pagination import PageParams
from responses.success import created_response, data_response, success_response
from responses.error import error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

email_service = EmailService()

admin_required = require_roles(UserRole.SUPER_ADMIN, UserRole.ADMIN)


def serialize(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post("/users", response_model=UserResponse)
async def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    """Invite a user; the invitee sets a password through the emailed link."""
    try:
        user, raw_token = await run_in_threadpool(user_service.create_user, payload, current_user, db)
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Creating user failed")
        return internal_server_error(f"Unable to create new user. Message: {e}")

    try:
        await email_service.send_registration_email(
            user.email, user.first_name, f"{CLIENT_URL}/complete-registration/{raw_token}"
        )
    except Exception:
        logger.exception("Registration email to %s failed", user.email)

    return created_response(
        f"New User, {user.email}, for tenant: {user.tenant_id}, successfully created",
        serialize(user),
    )


@router.get("/users")
def get_users(
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    try:
        users, total = user_service.list_users(current_user, params, db)
        return data_response([serialize(u) for u in users], meta=params.meta(total, "totalUsers"))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Listing users failed")
        return internal_server_error(str(e))


@router.put("/complete-registration/{token}", response_model=UserResponse)
def complete_registration(
    token: str,
    payload: CompleteRegistrationRequest,
    db: Session = Depends(get_db),
):
    try:
        user = auth_service.complete_registration(token, payload, db)
        return success_response("Registration successfully completed", serialize(user))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Completing registration failed")
        return internal_server_error(f"Unable to complete registration. Message: {e}")


@router.put("/users/profile-picture/{user_id}", response_model=UserResponse)
async def update_profile_picture(
    user_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        user = await user_service.save_profile_picture(user_id, file, current_user, db)
        return success_response("Profile picture updated", serialize(user))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Updating profile picture failed")
        return internal_server_error(str(e))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return data_response(serialize(user_service.get_user(user_id, current_user, db)))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Fetching user failed")
        return internal_server_error(f"Unable to retrieve User: {user_id}. Message: {e}")


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        user = user_service.update_user(user_id, payload, current_user, db)
        return success_response(f"User: {user_id} successfully updated", serialize(user))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Updating user failed")
        return internal_server_error(str(e))

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import CLIENT_URL, RESET_TOKEN_EXPIRE_MINUTES
from database.init import atomic
from database.models import User
from enums.user_status import UserStatus
from schemas.user_schema import CompleteRegistrationRequest
from services.email_service import EmailService
from utils.clock import utcnow
from utils.dependencies import hash_password, verify_password
from utils.exceptions import AuthError, InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def new_token() -> Tuple[str, str]:
    """A random token for the user and the digest kept in the database."""
    raw = secrets.token_hex(20)
    return raw, digest_token(raw)


def digest_token(raw: str) -> str:
    return hashlib.sha256(raw.encode()).hexdigest()


def get_user_by_username(username: str, db: Session) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_token(raw_token: str, db: Session) -> Optional[User]:
    return (
        db.query(User)
        .filter(
            User.reset_password_token == digest_token(raw_token),
            User.reset_password_expires > utcnow(),
        )
        .first()
    )


def authenticate(username: Optional[str], password: Optional[str], db: Session) -> User:
    if not username or not password:
        raise ValidationError("Please enter username and password")

    user = get_user_by_username(username, db)
    if (
        not user
        or user.status != UserStatus.ACTIVE.value
        or not verify_password(password, user.password)
    ):
        raise AuthError("Invalid username or password.")
    return user


def issue_reset_token(email: str, db: Session) -> Tuple[User, str]:
    user = get_user_by_email(email, db)
    if not user:
        raise NotFoundError("User not found with this email.")

    raw_token, digest = new_token()
    with atomic(db):
        user.reset_password_token = digest
        user.reset_password_expires = utcnow() + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES)
    db.refresh(user)
    return user, raw_token


def clear_reset_token(user: User, db: Session) -> None:
    with atomic(db):
        user.reset_password_token = None
        user.reset_password_expires = None


async def forgot_password(email: str, db: Session, email_service: EmailService) -> User:
    """Store a reset token and email its link. Database work runs in the threadpool."""
    user, raw_token = await run_in_threadpool(issue_reset_token, email, db)

    try:
        await email_service.send_password_reset_email(
            user.email, f"{CLIENT_URL}/password/reset/{raw_token}"
        )
    except Exception:
        logger.exception("Password reset email to %s failed", user.email)
        await run_in_threadpool(clear_reset_token, user, db)
        raise InternalError("Email could not be sent")

    return user


def reset_password(raw_token: str, password: str, confirm_password: Optional[str], db: Session) -> User:
    user = get_user_by_token(raw_token, db)
    if not user:
        raise ValidationError("Invalid or expired token")
    if not password:
        raise ValidationError("Password is required")
    if confirm_password is not None and confirm_password != password:
        raise ValidationError("Passwords do not match")

    try:
        with atomic(db):
            user.password = hash_password(password)
            user.reset_password_token = None
            user.reset_password_expires = None
            if user.status == UserStatus.INVITED.value:
                user.status = UserStatus.ACTIVE.value
        db.refresh(user)
    except SQLAlchemyError as e:
        raise InternalError(f"Password could not be reset. Message: {e}")
    logger.info("Password reset for user %s", user.id)
    return user


def complete_registration(raw_token: str, payload: CompleteRegistrationRequest, db: Session) -> User:
    if not payload.phone_number or payload.preferences is None or not payload.password:
        raise ValidationError("All fields are required")

    user = get_user_by_token(raw_token, db)
    if not user:
        raise ValidationError("Invalid or expired token")

    try:
        with atomic(db):
            user.phone_number = payload.phone_number
            user.preferences = payload.preferences
            user.password = hash_password(payload.password)
            user.status = UserStatus.ACTIVE.value
            user.reset_password_token = None
            user.reset_password_expires = None
        db.refresh(user)
    except SQLAlchemyError as e:
        raise InternalError(f"Unable to complete registration. Message: {e}")
    logger.info("User %s completed registration", user.id)
    return user

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config import COOKIE_EXPIRE_DAYS, COOKIE_SECURE
from database.init import get_db
from database.models import User
from schemas.auth_schema import ForgotPasswordRequest, LoginRequest, ResetPasswordRequest, Token
from services import auth_service
from services.email_service import EmailService
from utils.dependencies import TOKEN_COOKIE, create_access_token, get_current_user
from utils.exceptions import AppError
from responses.base import build_response
from responses.success import success_response
from responses.error import error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

email_service = EmailService()


def token_response(user: User, status_code: int = 200) -> JSONResponse:
    """Return the token in the body and as an httpOnly cookie."""
    token = create_access_token(user)
    response = build_response(status_code, data=Token(token=token))
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=COOKIE_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="strict",
        secure=COOKIE_SECURE,
    )
    return response


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = auth_service.authenticate(credentials.username, credentials.password, db)
        logger.info("User %s logged in", user.id)
        return token_response(user)
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Login failed")
        return internal_server_error(str(e))


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    response = success_response("Logged out successfully")
    response.delete_cookie(TOKEN_COOKIE, httponly=True, samesite="strict", secure=COOKIE_SECURE)
    return response


@router.post("/password/forgot")
async def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    try:
        user = await auth_service.forgot_password(payload.email, db, email_service)
        return success_response(f"Email sent to {user.email}")
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Forgot password failed")
        return internal_server_error(str(e))


@router.put("/password/reset/{token}", response_model=Token)
def reset_password(token: str, payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        user = auth_service.reset_password(token, payload.password, payload.confirm_password, db)
        return token_response(user)
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Password reset failed")
        return internal_server_error(str(e))

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional

from database.init import get_db
from database.models.user_model import User
from config import ALGORITHM, SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from enums.user_role import UserRole
from enums.user_status import UserStatus
from utils.exceptions import AuthError, ForbiddenError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login", auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_COOKIE = "token"


def hash_password(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None):
    to_encode = {"sub": str(user.id), "tenant": user.tenant_id, "role": user.role}
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = token or request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise AuthError("Please login first to access this resource")

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise AuthError("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or user.status == UserStatus.INACTIVE.value:
        raise AuthError("User not found")

    return user


def require_roles(*roles: UserRole):
    """Dependency factory rejecting users whose role is not listed."""
    allowed = {role.value for role in roles}

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError(
                f"Role {current_user.role} is not authorized to access this resource"
            )
        return current_user

    return checker


def is_super_admin(user: User) -> bool:
    return user.role == UserRole.SUPER_ADMIN.value


def resolve_tenant_id(current_user: User, requested_tenant_id: Optional[int] = None) -> int:
    """Only a SuperAdmin may act on behalf of another tenant."""
    if requested_tenant_id is not None and is_super_admin(current_user):
        return requested_tenant_id
    return current_user.tenant_id

# storefront/api/auth.py
# Роуты для регистрации и получения JWT токена.
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from storefront.core import security
from storefront.core.config import settings
from storefront.core.errors import InvalidArgument, Unauthenticated
from storefront.db.session import atomic
from storefront.models.user import User, RoleEnum
from storefront.schemas.user import Token, UserCreate, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(security.get_db)):
    """
    Регистрация пользователя: email + password.
    По умолчанию роль = user; администраторов создаёт scripts/create_admin.py.
    """
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise InvalidArgument("Email already registered")
    with atomic(db):
        user = User(
            email=payload.email,
            hashed_password=security.get_password_hash(payload.password),
            full_name=payload.full_name,
            role=RoleEnum.user,
        )
        db.add(user)
    db.refresh(user)
    logger.info(f"User {user.id} registered")
    return user


@router.post("/token", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(security.get_db)):
    """
    Логин: возвращает access_token (JWT).
    OAuth2PasswordRequestForm ожидает username и password, используем email как username.
    """
    user = db.query(User).filter(User.email == form_data.username).first()
    if not user or not security.verify_password(form_data.password, user.hashed_password):
        raise Unauthenticated("Incorrect credentials")
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = security.create_access_token(subject=str(user.id), expires_delta=access_token_expires)
    return Token(access_token=token)

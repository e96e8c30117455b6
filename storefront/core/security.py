# storefront/core/security.py
# Хеширование паролей, JWT и определение текущего пользователя по токену.
# Сервисы получают user_id явно; этот модуль является единственным местом, где он берётся из запроса.
from passlib.context import CryptContext
from datetime import datetime, timedelta
from jose import jwt, JWTError
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from storefront.core.config import settings
from storefront.core.errors import Forbidden, Unauthenticated
from storefront.db.session import SessionLocal
from storefront.models.user import User, RoleEnum

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_password_hash(password: str) -> str:
    """Хешируем пароль для хранения в БД."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяем пароль при логине."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Создаём JWT токен с полем sub = subject (обычно id пользователя)."""
    to_encode = {"sub": str(subject)}
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_user_id(token: str) -> int:
    """Возвращает id пользователя из токена или бросает Unauthenticated."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            raise Unauthenticated()
        return int(user_id)
    except (JWTError, ValueError):
        raise Unauthenticated()


def get_db():
    """Зависимость для получения сессии БД в эндпоинтах."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """Возвращает текущего пользователя по JWT или бросает Unauthenticated (401)."""
    user = db.get(User, decode_user_id(token))
    if user is None:
        raise Unauthenticated()
    return user


def require_role(role: RoleEnum):
    """Фабрика зависимости: проверяет роль пользователя."""
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise Forbidden("Insufficient privileges")
        return current_user
    return _checker


require_admin = require_role(RoleEnum.admin)

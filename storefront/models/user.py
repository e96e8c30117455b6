# storefront/models/user.py
# Модель пользователя магазина: email, hashed_password, role.
from sqlalchemy import Column, Integer, String, DateTime, Enum
from datetime import datetime
from storefront.db.base import Base
import enum


class RoleEnum(str, enum.Enum):
    user = "user"
    admin = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(Enum(RoleEnum), default=RoleEnum.user, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

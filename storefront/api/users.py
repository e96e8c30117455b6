# storefront/api/users.py
# Профиль текущего пользователя и админское управление пользователями.
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront.core.security import get_current_user, get_db, require_admin
from storefront.models.user import User
from storefront.schemas.user import UserOut, UserUpdate
from storefront.services import users

router = APIRouter()


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return users.list_users(db)


# /me объявлен выше, иначе его перехватил бы /{user_id}
@router.get("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return users.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    return users.update_user(db, user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    users.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# scripts/create_admin.py
# Создаёт администратора магазина или повышает существующего пользователя до admin.
# Использование: python -m scripts.create_admin admin@example.com secret "Admin Name"
import sys

from storefront.core.security import get_password_hash
from storefront.db.session import SessionLocal, atomic
from storefront.models.user import RoleEnum, User


def create_admin(email, password, full_name=None):
    db = SessionLocal()
    try:
        with atomic(db):
            user = db.query(User).filter(User.email == email).first()
            if user is None:
                user = User(email=email, hashed_password=get_password_hash(password), full_name=full_name)
                db.add(user)
            user.role = RoleEnum.admin
        return user.id
    finally:
        db.close()


def main():
    if len(sys.argv) < 3:
        print('Usage: create_admin.py EMAIL PASSWORD [FULL_NAME]')
        sys.exit(1)
    full_name = sys.argv[3] if len(sys.argv) > 3 else None
    user_id = create_admin(sys.argv[1], sys.argv[2], full_name)
    print('Admin ready, id =', user_id)


if __name__ == '__main__':
    main()

# scripts/check_db.py
# Проверяет подключение к DATABASE_URL из storefront.core.config.settings
from sqlalchemy import text
from storefront.core.config import settings
from storefront.db.session import build_engine


def main():
    url = settings.DATABASE_URL
    print('Trying to connect to:', url)
    engine = build_engine(url)
    try:
        with engine.connect() as conn:
            print('Connection OK, SELECT 1 ->', conn.execute(text("SELECT 1")).scalar())
    except Exception as e:
        print('Connection failed:', e)
    finally:
        engine.dispose()


if __name__ == '__main__':
    main()

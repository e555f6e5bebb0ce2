"""
Initialize database: creates all tables and seeds the first admin account
and a default branch.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.models.user import User
from app.models.branch import Branch
from app.models.enums import Role
from sqlalchemy import text, inspect


def main():
    print("🗄️  Rent-a-Car DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = SessionLocal()
    try:
        if not db.query(User).filter(User.username == settings.DEFAULT_ADMIN_USERNAME).first():
            db.add(User(username=settings.DEFAULT_ADMIN_USERNAME,
                        password=settings.DEFAULT_ADMIN_PASSWORD,
                        role=Role.ADMIN.value))
            print(f"\n👤 Admin account '{settings.DEFAULT_ADMIN_USERNAME}' created")
        if not db.query(Branch).first():
            db.add(Branch(name="Head Office"))
            print("🏢 Default branch 'Head Office' created")
        db.commit()
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host {settings.BACKEND_HOST} --port {settings.BACKEND_PORT}")


if __name__ == "__main__":
    main()

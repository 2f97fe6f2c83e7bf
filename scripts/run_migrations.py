#!/usr/bin/env python3
"""
Create the database tables straight from the models.

Deployed databases are migrated with `alembic upgrade head`; this script is
for local databases that only need the current schema.
"""

import asyncio
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fitsocial.config import settings
from fitsocial.database import engine, init_db


async def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    print(f"Database URL: {settings.database_url}")

    try:
        await init_db()
        print("✅ Database tables created successfully!")
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        return False
    finally:
        await engine.dispose()

    return True


if __name__ == "__main__":
    ok = asyncio.run(create_tables())
    sys.exit(0 if ok else 1)

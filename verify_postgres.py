import asyncio
import sys
import asyncpg

from backend.app.core.config import settings

# asyncpg connect needs the DSN without the SQLAlchemy driver suffix
db_url = settings.database_url.replace("+asyncpg", "")

print(f"Testing connection to: {db_url}")

async def check_db():
    try:
        conn = await asyncpg.connect(db_url)
        tables = await conn.fetch(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_name IN ('drivers', 'vehicles', 'audit_logs')"
        )
        print("✅ Connection Successful!")
        print(f"   Tables present: {sorted(row['table_name'] for row in tables) or 'none yet'}")
        await conn.close()
        sys.exit(0)
    except (OSError, asyncpg.PostgresError) as e:
        print(f"❌ Connection Failed: {e}")
        sys.exit(1)

if __name__ == "__main__":
    asyncio.run(check_db())

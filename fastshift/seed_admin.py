"""
Bootstrap script for the first admin user.

Role changes are admin-only through the API, so the very first admin has to
be created out-of-band. Run after the database is reachable:

    python -m fastshift.seed_admin admin@example.com "Admin Name"
"""

import asyncio
import sys

from fastshift.app.core.config import settings
from fastshift.app.db.session import Database
from fastshift.app.db.store import DocumentStore
from fastshift.app.models.common import utcnow
from fastshift.app.models.enums import UserRole
from fastshift.app.models.user import User


async def seed_admin(email: str, name: str = None) -> bool:
    """
    Promote ``email`` to admin, creating the user if needed.

    Returns:
        True if a new user was inserted, False if an existing one was promoted
    """
    database = Database.from_settings(settings)
    await database.create_all()
    try:
        async with database.session_factory() as session:
            store = DocumentStore(session)
            existing = await store.find_one(User, User.email == email)
            if existing is not None:
                await store.update_one(User, User.email == email, values={"role": UserRole.ADMIN})
                print(f"✅ {email} promoted to admin")
                return False

            now = utcnow()
            await store.insert_one(User, {
                "email": email,
                "name": name,
                "role": UserRole.ADMIN,
                "created_at": now,
                "last_logged_in": now,
                "details": {},
            })
            print(f"✅ Created admin user {email}")
            return True
    finally:
        await database.dispose()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m fastshift.seed_admin EMAIL [NAME]")
        sys.exit(1)
    asyncio.run(seed_admin(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))

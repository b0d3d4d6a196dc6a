"""
Bootstrap the first administrator.
Creates a superadmin account used for the first login.
"""
import asyncio
import os
import uuid

from sqlalchemy import select

from crudapi.core.config import get_settings
from crudapi.core.crypto import PasswordHasher
from crudapi.infrastructure.database import Database
from crudapi.infrastructure.database.models import User
from crudapi.infrastructure.database.repositories import SqlAccountRepository
from crudapi.modules.accounts import ADMIN_ROLES

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@admin.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "12345")


async def create_default_admin():
    """Create the default superadmin unless an administrator already exists."""
    settings = get_settings()
    database = Database(settings.database)
    await database.connect()
    await database.create_all()

    try:
        async with database.session() as db:
            stmt = select(User).where(User.role.in_(ADMIN_ROLES))
            result = await db.execute(stmt)
            if result.scalars().first() is not None:
                print("Administrator already exists, nothing to do")
                return

            hasher = PasswordHasher(rounds=settings.security.bcrypt_rounds)
            repository = SqlAccountRepository(db)
            await repository.create_account(
                first_name="Super",
                last_name="Admin",
                email=ADMIN_EMAIL,
                password=hasher.hash(ADMIN_PASSWORD),
                role="superadmin",
                verification=str(uuid.uuid4()),
                verified=True,
            )

            print("=" * 50)
            print("Default administrator created")
            print("=" * 50)
            print(f"E-mail: {ADMIN_EMAIL}")
            print(f"Password: {ADMIN_PASSWORD}")
            print("=" * 50)
            print("Change the password after the first login!")
            print("=" * 50)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(create_default_admin())

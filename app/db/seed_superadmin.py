"""
Seed script to create the first SUPERADMIN user.

Run once (after the tables exist) with env set:
  SUPERADMIN_EMAIL=admin@yourschool.com
  SUPERADMIN_PASSWORD=YourSecurePassword

Creates or updates one users row with role superadmin and no school.
"""
import asyncio

from app.auth.models import User
from app.auth.security import hash_password
from app.core.config import settings
from app.core.enums import Role
from app.core.logging import configure_logging, get_logger
from app.db.session import AsyncSessionLocal, create_all
from app.db.store import EntityStore

logger = get_logger(__name__)


async def seed_superadmin(store: EntityStore) -> None:
    email = settings.superadmin_email
    password = settings.superadmin_password
    if not email or not password:
        logger.warning("No superadmin email/password; skipping superadmin user")
        return

    user = await store.find_one_active(User, email=email)
    if user is None:
        await store.create(
            User,
            name=settings.superadmin_name,
            email=email,
            password_hash=hash_password(password),
            role=Role.SUPERADMIN.value,
            school_id=None,
        )
        logger.info("Created superadmin user", email=email)
    else:
        await store.update_active_by_id(
            User,
            user.id,
            {
                "name": settings.superadmin_name,
                "role": Role.SUPERADMIN.value,
                "password_hash": hash_password(password),
                "school_id": None,
            },
        )
        logger.info("Updated existing user to superadmin", email=email)

    await store.commit()


async def main() -> None:
    configure_logging()
    await create_all()
    async with AsyncSessionLocal() as db:
        store = EntityStore(db)
        try:
            await seed_superadmin(store)
        except Exception:
            await store.rollback()
            logger.exception("Superadmin seed failed")
            raise


if __name__ == "__main__":
    asyncio.run(main())

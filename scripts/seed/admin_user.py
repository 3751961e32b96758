"""Create the bootstrap super admin.

Reads BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD from the environment
(or .env). Nothing is created when either is missing or the admin exists.

Usage:
    BOOTSTRAP_ADMIN_EMAIL=owner@example.com BOOTSTRAP_ADMIN_PASSWORD=... \
        python -m scripts.seed.admin_user
"""

import asyncio
import sys

from libs.common.config import get_settings
from libs.db.config import Database
from services.storefront_service.services.admin_auth import ensure_bootstrap_admin


async def create_admin_user() -> int:
    settings = get_settings()
    if not settings.BOOTSTRAP_ADMIN_EMAIL or not settings.BOOTSTRAP_ADMIN_PASSWORD:
        print("BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD must be set.")
        return 1
    if len(settings.BOOTSTRAP_ADMIN_PASSWORD) < 12:
        print("BOOTSTRAP_ADMIN_PASSWORD must be at least 12 characters.")
        return 1

    database = Database.from_settings(settings)
    try:
        async with database.session_factory() as db:
            admin = await ensure_bootstrap_admin(db, settings)
    finally:
        await database.dispose()

    if admin is None:
        print(f"Admin {settings.BOOTSTRAP_ADMIN_EMAIL} already exists.")
    else:
        print(f"Created super admin {admin.email}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(create_admin_user()))

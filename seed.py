"""
Create the initial admin accounts.

Creates one super-admin (adminRole ADMIN) and, optionally, one plain admin
(adminRole USER). Existing accounts are left untouched, so the script is safe
to run more than once.

Run this script from the project root after `alembic upgrade head`:
    SEED_ADMIN_EMAIL=admin@example.com SEED_ADMIN_PASSWORD=secret123 python seed.py
"""

import logging
import os
import sys

from app.core.config import settings
from app.core.database import Database
from app.core.logging_config import setup_logging
from app.crud import user as user_crud
from app.models.user import AdminRole
from app.schemas.user import AdminUserCreateRequest

logger = logging.getLogger(__name__)


def seed_admin(db, name: str, email: str, password: str, admin_role: AdminRole) -> None:
    if user_crud.get_by_email(db, email):
        logger.info(f"User {email} already exists, skipping")
        return
    data = AdminUserCreateRequest(name=name, email=email, password=password)
    user = user_crud.create_admin(db, data, admin_role=admin_role)
    logger.info(f"Created {admin_role.value} admin {user.email} ({user.id})")


def main() -> int:
    setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS, service=settings.PROJECT_NAME)

    email = os.getenv("SEED_ADMIN_EMAIL")
    password = os.getenv("SEED_ADMIN_PASSWORD")
    if not email or not password:
        logger.error("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
        return 1

    database = Database(settings.DATABASE_URL)
    database.init()
    if settings.AUTO_CREATE_TABLES or database.is_sqlite:
        database.create_all()

    db = database.session()
    try:
        seed_admin(db, os.getenv("SEED_ADMIN_NAME", "Administrator"), email, password, AdminRole.ADMIN)

        panel_email = os.getenv("SEED_PANEL_EMAIL")
        panel_password = os.getenv("SEED_PANEL_PASSWORD")
        if panel_email and panel_password:
            seed_admin(db, os.getenv("SEED_PANEL_NAME", "Interviewer"), panel_email, panel_password, AdminRole.USER)
    finally:
        db.close()
        database.close()

    logger.info("Seeding complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

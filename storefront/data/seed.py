# storefront/data/seed.py
from storefront.data.database import SessionLocal
from storefront.repos.user_repo import UserRepo
from storefront.services.auth_service import AuthService
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed(session_factory=SessionLocal):
    """Konto admina z ADMIN_EMAIL/ADMIN_PASSWORD, tylko gdy zadnego admina jeszcze nie ma."""
    if not (ADMIN_EMAIL and ADMIN_PASSWORD):
        return None

    db = session_factory()
    try:
        if UserRepo(db).find_by_role("admin"):
            return None
        admin = AuthService(db).create_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
        logger.info(f"Seeded admin account {admin.email}")
        return admin.id
    finally:
        db.close()

# create_tables.py
"""Create the Taskberry tables and the first super admin"""
import logging

from taskberry.config.settings import settings
from taskberry.database import Base, SessionLocal, engine
from taskberry.models.report import Report  # noqa: F401  registers the table
from taskberry.models.task import Task  # noqa: F401
from taskberry.models.user import Role, User, UserStatus
from taskberry.utils.auth import create_access_token

logger = logging.getLogger(__name__)


def create_tables():
    """Create all tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("All tables created")


def create_super_admin() -> User:
    """Create the bootstrap super admin if it doesn't exist yet"""
    email = settings.BOOTSTRAP['super_admin_email'].lower()
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == email).first()
        if admin is None:
            admin = User(
                name=settings.BOOTSTRAP['super_admin_name'],
                email=email,
                role=Role.super_admin.value,
                status=UserStatus.active.value,
            )
            db.add(admin)
            db.commit()
            db.refresh(admin)
            logger.info(f"Super admin created: {email}")
        else:
            logger.info(f"Super admin already exists: {email}")
        return admin
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.SERVER['log_level'])
    create_tables()
    admin = create_super_admin()
    # Development token; production tokens come from the identity service
    print(f"Bearer token for {admin.email}: {create_access_token({'sub': admin.email})}")

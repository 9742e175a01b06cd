from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from taskberry.config.settings import settings


def _engine_options() -> dict:
    if settings.is_sqlite():
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on a single connection
        if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    if settings.DATABASE_SSLMODE:
        # If you're using PostgreSQL on Render or similar, keep sslmode=require
        return {"connect_args": {"sslmode": settings.DATABASE_SSLMODE}}
    return {}


engine = create_engine(settings.DATABASE_URL, **_engine_options())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# This is required to be imported wherever DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()

"""Engine and session factory shared by the API and maintenance scripts."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rentmarket.app.core.settings import get_settings

settings = get_settings()

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    from rentmarket.app.db.base import Base

    Base.metadata.create_all(bind=engine)


def close_db() -> None:
    engine.dispose()

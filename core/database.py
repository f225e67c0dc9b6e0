from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config import Settings
# Use the same Base as models to ensure one metadata registry
from models.base import Base


class Database:
    """Pooled engine plus session factory, created at startup and disposed on shutdown."""

    def __init__(self, settings: Settings):
        url = settings.SQLALCHEMY_DATABASE_URI
        engine_kwargs = {
            "pool_pre_ping": True,
            "pool_recycle": 3600,
            "future": True,
        }
        if url.startswith("sqlite"):
            # Request handlers run in a thread pool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
            # DB_POOL_SIZE is a hard cap on open connections
            engine_kwargs["max_overflow"] = 0
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, future=True
        )

    def create_all(self):
        # Import model modules so their tables are registered on Base.metadata
        from models import asset, review, session, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()

"""Generate database session"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base

IN_MEMORY_URL = "sqlite://"


def create_db_engine(database_url: str = IN_MEMORY_URL) -> Engine:
    """Engine with all tables created. An in-memory database is shared by every session of the engine."""
    if database_url in (IN_MEMORY_URL, "sqlite:///:memory:"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


@contextmanager
def get_db(engine: Engine) -> Iterator[Session]:
    db = sessionmaker(bind=engine)()
    try:
        yield db
    finally:
        db.close()

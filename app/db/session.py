from contextlib import contextmanager
from typing import Iterator
from sqlmodel import SQLModel, create_engine, Session
from app.core.config import settings

def build_engine(database_url: str = settings.DATABASE_URL, echo: bool = settings.DATABASE_ECHO, **kwargs):
    # check_same_thread is needed for SQLite, the timeout makes concurrent
    # writers wait for the lock instead of failing with "database is locked"
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT}
    return create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)

engine = build_engine()

def get_session():
    with Session(engine) as session:
        yield session

def create_db_and_tables(bind=None):
    # Import models to ensure they are registered with SQLModel metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)

@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back.

    Any exception raised inside the block (including the store's own
    business errors) discards every pending write before propagating.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from countdown_binge.database import Base
from countdown_binge import models  # noqa: F401  (registers tables)
from countdown_binge.services.followed_shows_store import FollowedShowsStore
from countdown_binge.services.repository import ShowRepository


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads (for TestClient)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return FollowedShowsStore(db)


@pytest.fixture
def repository(store):
    return ShowRepository(store)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import secretshare.main as main_module
from secretshare.clock import get_clock
from secretshare.database import Base, get_db
from secretshare.main import app
from secretshare.middleware.rate_limit import limiter
from tests.test_utils import START, FrozenClock


@pytest.fixture
def db_session():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    """A controllable clock starting at a fixed instant."""
    return FrozenClock(START)


@pytest.fixture
def client(db_session, clock):
    """Test client wired to the test database and clock, with rate limiting off."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    limiter.enabled = False

    # check_database_tables() must inspect the test database
    original_engine = main_module.engine
    main_module.engine = db_session.get_bind()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    limiter.enabled = True
    main_module.engine = original_engine

import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RECORD_STORE"] = "sql"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("BONUS_RULES_FILE", None)

import bono.models  # noqa: F401
from bono.core.bonus_rules import DEFAULT_BONUS_RULES
from bono.database import Base, get_db
from bono.main import app
from bono.services.bonus_calculator import BonusCalculator
from bono.stores.sheet_store import SheetRecordStore
from bono.stores.sql_store import SqlRecordStore
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture
def rules():
    return DEFAULT_BONUS_RULES

@pytest.fixture
def calculator(rules):
    return BonusCalculator(rules)

@pytest.fixture(params=["sql", "sheet"])
def store(request, db_session):
    """Each store test runs against both backends."""
    if request.param == "sql":
        return SqlRecordStore(db_session)
    return SheetRecordStore()

@pytest.fixture
def sheet_store():
    return SheetRecordStore()

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

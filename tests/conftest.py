import asyncio
import pytest
from fastapi.testclient import TestClient

from app import create_app
from boards import BoardService
from database import DatabaseManager


@pytest.fixture
def db(tmp_path):
    """Create a temporary thread store for testing."""
    database = DatabaseManager(str(tmp_path / "test.db"))
    asyncio.run(database.init_database())
    return database


@pytest.fixture
def service(db):
    return BoardService(db)


@pytest.fixture
def client(tmp_path):
    """HTTP client against an app backed by its own temporary store."""
    app = create_app(DatabaseManager(str(tmp_path / "api.db")))
    with TestClient(app) as test_client:
        yield test_client

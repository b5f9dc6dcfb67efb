import mongomock
import pytest
from fastapi.testclient import TestClient

from stemforum.main import app, rate_limiter
from stemforum.services.database import db_manager

TEST_DB = "stem-forum-test"


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture(autouse=True)
def mongo_db(mongo_client):
    """Point the shared connection manager at an in-memory MongoDB"""
    db_manager.configure(lambda: mongo_client, database_name=TEST_DB)
    rate_limiter.reset()
    yield mongo_client[TEST_DB]
    db_manager.close()
    rate_limiter.reset()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_down():
    """Make every connection attempt fail"""
    from pymongo.errors import ServerSelectionTimeoutError

    def factory():
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    db_manager.configure(factory)
    yield

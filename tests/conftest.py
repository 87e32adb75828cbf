import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import main
from stores import ComplaintStore, UserStore


@pytest.fixture
def db():
    client = mongomock.MongoClient()
    test_db = client["grievance_test"]
    database.ensure_indexes(test_db)
    return test_db


@pytest.fixture
def users(db):
    return UserStore(db)


@pytest.fixture
def complaints(db):
    return ComplaintStore(db)


@pytest.fixture
def client(db):
    main.app.dependency_overrides[main.get_db] = lambda: db
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()

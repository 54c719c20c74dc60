import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENV", "test")

import pytest

from app.db.init_db import create_tables, seed_demo_data
from app.services.sessions import store


@pytest.fixture(scope="session", autouse=True)
def database():
    create_tables()
    seed_demo_data()
    yield


@pytest.fixture(autouse=True)
def clean_sessions():
    yield
    store.clear()

# tests/conftest.py
import os
import sys
import pytest

# чтобы import create_app работал при запуске из корня
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from catalog.components import InMemoryComponentStore, SqlComponentStore
from extensions import db


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "COMPONENT_STORE": "sql",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def memory_store():
    return InMemoryComponentStore()


@pytest.fixture()
def sql_store(app):
    return SqlComponentStore(db)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each contract test runs once per backend."""
    return request.getfixturevalue(f"{request.param}_store")

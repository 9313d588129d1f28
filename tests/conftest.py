import pytest

from bakers_price.db.database import init_db


@pytest.fixture(autouse=True)
def db_path(tmp_path, monkeypatch):
    """Give every test its own freshly initialized database file."""
    path = tmp_path / "test.db"
    monkeypatch.setenv("DB_PATH", str(path))
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("CURRENCY_SYMBOL", raising=False)
    init_db()
    return path


@pytest.fixture
def client(db_path):
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c

# tests/conftest.py
import os

# must be set before healthcare.config.settings is imported
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import sqlite3
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from healthcare.config.settings import Settings
from healthcare.main import create_app


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "healthcare-test.db"


@pytest.fixture
def app_settings(db_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        auto_create_tables=True,
    )


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def count_rows(db_path):
    """Count rows straight from the SQLite file, bypassing the API."""
    def _count(table: str, where: str = "", params: tuple = ()) -> int:
        conn = sqlite3.connect(db_path)
        try:
            sql = f"SELECT COUNT(*) FROM {table}" + (f" WHERE {where}" if where else "")
            return conn.execute(sql, params).fetchone()[0]
        finally:
            conn.close()
    return _count


# tests/unit/routes/conftest.py
"""API 契约测试专用 fixtures.

提供 app 与 test_client fixtures。
"""

import pytest

from leafconfig import create_app
from leafconfig.settings import Settings


@pytest.fixture(scope="function")
def app(monkeypatch):
    """创建测试应用实例(内存 SQLite)."""
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")

    settings = Settings.load()
    app = create_app(settings=settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def client(app):
    """创建测试客户端."""
    return app.test_client()

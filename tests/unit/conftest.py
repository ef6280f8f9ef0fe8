# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供环境隔离与参数存储相关的通用 fixtures。
"""

import pytest

from leafconfig.services.config_store import InMemoryConfigStore
from leafconfig.services.form_service.parameter_form_service import ParameterFormProcessor
from leafconfig.services.form_service.schema_registry import build_default_registry


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 不依赖外部数据库等基础设施
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    for name in ("DEFAULT_MODEL_YEAR", "DEFAULT_CABINTEMP_OFFSET", "DEFAULT_PIN_EV", "NEW_CAR_GIDS", "NEW_CAR_AH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def memory_store():
    """空的进程内参数存储."""
    return InMemoryConfigStore()


@pytest.fixture
def processor(memory_store):
    """基于进程内存储与内置表单的处理器."""
    return ParameterFormProcessor(memory_store, build_default_registry())

"""参数存储能力.

ParameterFormProcessor 只通过 ConfigStore 协议读写参数,不关心具体存储引擎.
布尔值以 ``yes``/``no`` 字符串存储,与车载固件的配置格式保持一致.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from leafconfig.services.form_service.field_spec import BOOL_FALSE, BOOL_TRUE

_TRUTHY_VALUES = frozenset({"yes", "true", "1", "on"})


def encode_bool(value: bool) -> str:
    return BOOL_TRUE if value else BOOL_FALSE


def decode_bool(raw: str | None, *, default: bool) -> bool:
    """将存储中的字符串解析为布尔值,缺失或空值返回默认值."""
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY_VALUES


@runtime_checkable
class ConfigStore(Protocol):
    """参数存储协议.

    ``set_param_values`` 必须整体生效,``get_param_values`` 必须读取同一时刻的快照:
    并发读者要么看到全部新值,要么全部旧值.
    """

    def get_param_value(self, namespace: str, key: str, default: str = "") -> str: ...

    def get_param_value_bool(self, namespace: str, key: str, default: bool = False) -> bool: ...

    def get_param_values(self, namespace: str, keys: Iterable[str]) -> dict[str, str]: ...

    def set_param_value(self, namespace: str, key: str, value: str) -> None: ...

    def set_param_value_bool(self, namespace: str, key: str, value: bool) -> None: ...

    def set_param_values(self, namespace: str, values: Mapping[str, str]) -> None: ...


class InMemoryConfigStore:
    """进程内参数存储,用于测试与无数据库环境.

    批量写入在副本上完成后整体替换命名空间字典.
    """

    def __init__(self, initial: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._lock = threading.Lock()
        self._namespaces: dict[str, dict[str, str]] = {
            namespace: dict(values) for namespace, values in (initial or {}).items()
        }

    def get_param_value(self, namespace: str, key: str, default: str = "") -> str:
        with self._lock:
            return self._namespaces.get(namespace, {}).get(key, default)

    def get_param_value_bool(self, namespace: str, key: str, default: bool = False) -> bool:
        with self._lock:
            raw = self._namespaces.get(namespace, {}).get(key)
        return decode_bool(raw, default=default)

    def get_param_values(self, namespace: str, keys: Iterable[str]) -> dict[str, str]:
        """一次性读取多个参数,只返回存储中存在的键."""
        with self._lock:
            current = self._namespaces.get(namespace, {})
            return {key: current[key] for key in keys if key in current}

    def set_param_value(self, namespace: str, key: str, value: str) -> None:
        self.set_param_values(namespace, {key: value})

    def set_param_value_bool(self, namespace: str, key: str, value: bool) -> None:
        self.set_param_values(namespace, {key: encode_bool(value)})

    def set_param_values(self, namespace: str, values: Mapping[str, str]) -> None:
        with self._lock:
            staged = dict(self._namespaces.get(namespace, {}))
            staged.update(values)
            self._namespaces[namespace] = staged

    def has_param(self, namespace: str, key: str) -> bool:
        with self._lock:
            return key in self._namespaces.get(namespace, {})

    def snapshot(self, namespace: str) -> dict[str, str]:
        """返回命名空间当前取值的副本."""
        with self._lock:
            return dict(self._namespaces.get(namespace, {}))


__all__ = [
    "ConfigStore",
    "InMemoryConfigStore",
    "decode_bool",
    "encode_bool",
]

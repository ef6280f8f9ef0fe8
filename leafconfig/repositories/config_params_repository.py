"""参数存储 Repository.

职责:
- 基于 SQLAlchemy 实现 ConfigStore 协议
- 批量写入在同一事务内完成,失败时整体回滚并抛出 StorageError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from leafconfig import db
from leafconfig.errors import StorageError
from leafconfig.models.config_param import ConfigParam
from leafconfig.services.config_store import decode_bool, encode_bool
from leafconfig.utils.structlog_config import log_error

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class ConfigParamsRepository:
    """参数存储 Repository."""

    def get_param_value(self, namespace: str, key: str, default: str = "") -> str:
        row = self._find(namespace, key)
        return default if row is None else row.value

    def get_param_value_bool(self, namespace: str, key: str, default: bool = False) -> bool:
        row = self._find(namespace, key)
        return decode_bool(None if row is None else row.value, default=default)

    def get_param_values(self, namespace: str, keys: Iterable[str]) -> dict[str, str]:
        """单次查询读取多个参数,只返回存储中存在的键."""
        wanted = list(keys)
        if not wanted:
            return {}
        rows = ConfigParam.query.filter(
            ConfigParam.namespace == namespace,
            ConfigParam.key.in_(wanted),
        ).all()
        return {row.key: row.value for row in rows}

    def set_param_value(self, namespace: str, key: str, value: str) -> None:
        self.set_param_values(namespace, {key: value})

    def set_param_value_bool(self, namespace: str, key: str, value: bool) -> None:
        self.set_param_values(namespace, {key: encode_bool(value)})

    def set_param_values(self, namespace: str, values: Mapping[str, str]) -> None:
        """在单个事务内写入一批参数.

        Args:
            namespace: 参数命名空间.
            values: 参数键到字符串值的映射.

        Raises:
            StorageError: 数据库写入失败时抛出,事务已回滚.

        """
        try:
            existing = {
                row.key: row
                for row in ConfigParam.query.filter(
                    ConfigParam.namespace == namespace,
                    ConfigParam.key.in_(list(values)),
                ).all()
            }
            for key, value in values.items():
                row = existing.get(key)
                if row is None:
                    db.session.add(ConfigParam(namespace=namespace, key=key, value=value))
                else:
                    row.value = value
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log_error(
                "参数批量写入失败",
                module="config_params",
                exception=exc,
                namespace=namespace,
                keys=list(values),
            )
            raise StorageError(extra={"namespace": namespace}) from exc

    def list_params(self, namespace: str) -> list[ConfigParam]:
        return ConfigParam.query.filter(ConfigParam.namespace == namespace).order_by(ConfigParam.key.asc()).all()

    @staticmethod
    def _find(namespace: str, key: str) -> ConfigParam | None:
        return ConfigParam.query.filter_by(namespace=namespace, key=key).first()


__all__ = ["ConfigParamsRepository"]

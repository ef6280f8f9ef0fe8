"""参数表单处理服务
---------------------------------
负责参数表单的整批校验、原子提交与当前值读取。

一次提交的状态流转: 接收 -> 校验 -> 拒绝(返回全部字段错误,存储不变) | 提交(全部写入)。
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from leafconfig.constants.system_constants import ErrorMessages
from leafconfig.services.config_store import decode_bool, encode_bool
from leafconfig.services.form_service.field_spec import (
    BOOL_TRUE,
    FieldError,
    FieldKind,
    FieldValue,
    ValidatedBatch,
)
from leafconfig.services.form_service.field_validator import validate_field
from leafconfig.utils.structlog_config import log_info, log_warning

if TYPE_CHECKING:
    from leafconfig.services.config_store import ConfigStore
    from leafconfig.services.form_service.field_spec import FieldSpec
    from leafconfig.services.form_service.schema_registry import Schema, SchemaRegistry
    from leafconfig.types import JsonDict, StoredValues, SubmittedValues

ResultT = TypeVar("ResultT")


@dataclass(slots=True)
class ServiceResult(Generic[ResultT]):
    """统一的服务层返回结构。

    Attributes:
        success: 操作是否成功。
        data: 返回的数据对象，失败时为 None。
        message: 返回消息，用于前端展示。
        message_key: 消息键，用于国际化。
        errors: 按表单顺序排列的字段错误。
        extra: 额外信息字典。

    """

    success: bool
    data: ResultT | None = None
    message: str | None = None
    message_key: str | None = None
    errors: list[FieldError] = field(default_factory=list)
    extra: JsonDict = field(default_factory=dict)

    @classmethod
    def ok(cls, data: ResultT, message: str | None = None) -> ServiceResult[ResultT]:
        """创建成功结果。"""
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(
        cls,
        message: str,
        *,
        message_key: str | None = None,
        errors: list[FieldError] | None = None,
    ) -> ServiceResult[ResultT]:
        """创建失败结果。

        Args:
            message: 错误消息。
            message_key: 可选的消息键。
            errors: 字段级错误列表。

        Returns:
            失败的 ServiceResult 实例。

        """
        return cls(success=False, data=None, message=message, message_key=message_key, errors=list(errors or []))


class ParameterFormProcessor:
    """参数表单处理器。

    通过注入的 ConfigStore 读写参数;同一命名空间的提交互斥执行,不同命名空间互不阻塞。
    校验过程不修改任何共享状态。
    """

    def __init__(self, store: ConfigStore, registry: SchemaRegistry) -> None:
        self._store = store
        self._registry = registry
        self._locks_guard = threading.Lock()
        self._namespace_locks: dict[str, threading.Lock] = {}

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    def get_schema(self, name: str) -> Schema:
        return self._registry.get(name)

    # --------------------------------------------------------------------- #
    # 校验
    # --------------------------------------------------------------------- #
    def validate(self, schema: Schema, submitted: SubmittedValues) -> ServiceResult[ValidatedBatch]:
        """整批校验提交值。

        对表单内每个字段执行校验并累积全部错误,不会在首个错误处中断。
        缺失的字段按空串处理。

        Args:
            schema: 目标表单。
            submitted: 表单变量名(或存储键)到原始字符串的映射。

        Returns:
            成功时 data 为 ValidatedBatch;失败时 errors 为按字段顺序排列的错误列表。

        """
        values: dict[str, FieldValue] = {}
        errors: list[FieldError] = []
        for spec in schema:
            outcome = validate_field(spec, _submitted_value(spec, submitted))
            if isinstance(outcome, FieldError):
                errors.append(outcome)
            else:
                values[spec.name] = outcome

        if errors:
            return ServiceResult.fail(
                ErrorMessages.PARAMETERS_INVALID,
                message_key="PARAMETERS_INVALID",
                errors=errors,
            )
        return ServiceResult.ok(ValidatedBatch(schema_name=schema.name, values=values))

    # --------------------------------------------------------------------- #
    # 提交
    # --------------------------------------------------------------------- #
    def commit(self, schema: Schema, batch: ValidatedBatch) -> StoredValues:
        """将校验通过的整批取值写入存储。

        派生字段(如 autocharge = NOT chgnoteonly)在此时计算。所有取值先暂存,
        再在命名空间锁内通过一次批量写入生效。

        Args:
            schema: 目标表单。
            batch: validate 返回的 ValidatedBatch。

        Returns:
            实际写入的 存储键 -> 字符串 映射。

        Raises:
            ValueError: batch 不属于该表单或缺少字段时抛出。
            StorageError: 存储写入失败时由存储实现抛出,不会产生部分写入。

        """
        if batch.schema_name != schema.name:
            msg = f"校验结果属于表单 {batch.schema_name}, 不能提交到 {schema.name}"
            raise ValueError(msg)

        missing = [name for name in schema.field_names if name not in batch.values]
        if missing:
            msg = f"校验结果缺少字段: {', '.join(missing)}"
            raise ValueError(msg)

        staged = {spec.name: _stored_form(spec, batch.values[spec.name]) for spec in schema}
        with self._lock_for(schema.namespace):
            self._store.set_param_values(schema.namespace, staged)
        return staged

    # --------------------------------------------------------------------- #
    # 读取
    # --------------------------------------------------------------------- #
    def read(self, schema: Schema) -> StoredValues:
        """读取表单当前值,存储中没有的字段返回默认值。

        所有字段取自存储的同一份快照,不会混入并发提交的部分结果。
        """
        stored = self._store.get_param_values(schema.namespace, schema.field_names)
        return {spec.name: stored.get(spec.name, spec.default) for spec in schema}

    def form_values(self, schema: Schema) -> StoredValues:
        """按表单变量名返回当前值,派生字段还原为输入语义。"""
        stored = self.read(schema)
        values: StoredValues = {}
        for spec in schema:
            raw = stored[spec.name]
            if spec.negate_input:
                raw = encode_bool(not decode_bool(raw, default=spec.default == BOOL_TRUE))
            values[spec.input_name] = raw
        return values

    # --------------------------------------------------------------------- #
    # 主流程
    # --------------------------------------------------------------------- #
    def submit(self, schema_name: str, submitted: SubmittedValues) -> ServiceResult[StoredValues]:
        """校验并提交一次表单。

        Args:
            schema_name: 注册表中的表单名称。
            submitted: 原始提交值。

        Returns:
            成功时 data 为写入的取值;失败时 errors 为全部字段错误,存储保持不变。

        Raises:
            UnknownSchemaError: 表单未注册时抛出。
            StorageError: 存储写入失败时抛出。

        """
        schema = self._registry.get(schema_name)
        validation = self.validate(schema, submitted)
        if not validation.success or validation.data is None:
            log_warning(
                "参数提交校验失败",
                module="parameter_forms",
                schema=schema.name,
                fields=[error.field for error in validation.errors],
            )
            return ServiceResult.fail(
                validation.message or ErrorMessages.VALIDATION_ERROR,
                message_key=validation.message_key,
                errors=validation.errors,
            )

        committed = self.commit(schema, validation.data)
        log_info(
            "参数提交成功",
            module="parameter_forms",
            schema=schema.name,
            namespace=schema.namespace,
            fields=list(committed),
        )
        return ServiceResult.ok(committed, message=schema.success_message)

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    def _lock_for(self, namespace: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._namespace_locks.get(namespace)
            if lock is None:
                lock = threading.Lock()
                self._namespace_locks[namespace] = lock
            return lock


def _submitted_value(spec: FieldSpec, submitted: SubmittedValues) -> str:
    if spec.input_name in submitted:
        return submitted[spec.input_name]
    return submitted.get(spec.name, "")


def _stored_form(spec: FieldSpec, value: FieldValue) -> str:
    if spec.kind is FieldKind.BOOLEAN:
        flag = bool(value.value)
        return encode_bool(not flag if spec.negate_input else flag)
    return value.raw


__all__ = ["ParameterFormProcessor", "ServiceResult"]

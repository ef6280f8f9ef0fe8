"""字段校验器.

对单个字段的原始字符串输入做类型与范围校验,成功时返回类型化取值.

数值解析沿用车载固件的宽松规则(等价于 C 的 atoi/atof):
只取最长的合法数值前缀,没有数值前缀时按 0 处理,而不是报错.
"""

from __future__ import annotations

import re

from leafconfig.services.form_service.field_spec import (
    BOOL_TRUE,
    FieldError,
    FieldKind,
    FieldSpec,
    FieldValue,
)

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def lenient_int(raw: str) -> int:
    """按 atoi 规则解析整数前缀.

    Args:
        raw: 原始输入.

    Returns:
        int: 解析结果,无数值前缀时为 0.

    """
    match = _INT_PREFIX.match(raw)
    return int(match.group(1)) if match else 0


def lenient_float(raw: str) -> float:
    """按 atof 规则解析浮点数前缀."""
    match = _FLOAT_PREFIX.match(raw)
    return float(match.group(1)) if match else 0.0


def format_bound(bound: float) -> str:
    """将边界值格式化为提示文本,整数值不带小数点."""
    if float(bound).is_integer():
        return str(int(bound))
    return str(bound)


def describe_range(spec: FieldSpec) -> str:
    """生成边界描述,如 ``≥ 0`` 或 ``0…100``."""
    if spec.minimum is not None and spec.maximum is not None:
        return f"{format_bound(spec.minimum)}…{format_bound(spec.maximum)}"
    if spec.minimum is not None:
        return f"≥ {format_bound(spec.minimum)}"
    if spec.maximum is not None:
        return f"≤ {format_bound(spec.maximum)}"
    return ""


def _empty_message(spec: FieldSpec) -> str:
    return spec.empty_message or f"{spec.label} can not be empty"


def _range_message(spec: FieldSpec) -> str:
    return spec.range_message or f"{spec.label} invalid, must be {describe_range(spec)}"


def _selection_message(spec: FieldSpec) -> str:
    return f"{spec.label} invalid selection"


def _in_range(spec: FieldSpec, number: float) -> bool:
    if spec.minimum is not None and number < spec.minimum:
        return False
    return not (spec.maximum is not None and number > spec.maximum)


def validate_field(spec: FieldSpec, raw: str | None) -> FieldValue | FieldError:
    """校验单个字段.

    Args:
        spec: 字段规格.
        raw: 提交的原始字符串,缺失时视为空串.

    Returns:
        FieldValue | FieldError: 成功时为类型化取值,失败时为字段错误.

    """
    text = "" if raw is None else str(raw)

    # 布尔字段只认 "yes",其余一律为 False,不会产生错误
    if spec.kind is FieldKind.BOOLEAN:
        return FieldValue(kind=spec.kind, value=text == BOOL_TRUE, raw=text)

    if text == "":
        if spec.required:
            return FieldError(field=spec.input_name, message=_empty_message(spec))
        return FieldValue(kind=spec.kind, value=None, raw=text)

    if spec.kind is FieldKind.ENUM:
        if text not in spec.options:
            return FieldError(field=spec.input_name, message=_selection_message(spec))
        return FieldValue(kind=spec.kind, value=text, raw=text)

    if spec.kind.is_numeric:
        number: int | float = lenient_int(text) if spec.kind.is_integral else lenient_float(text)
        if not _in_range(spec, number):
            return FieldError(field=spec.input_name, message=_range_message(spec))
        return FieldValue(kind=spec.kind, value=number, raw=text)

    return FieldValue(kind=spec.kind, value=text, raw=text)


__all__ = [
    "describe_range",
    "format_bound",
    "lenient_float",
    "lenient_int",
    "validate_field",
]

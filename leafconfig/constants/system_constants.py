"""leafconfig - 常量定义模块

统一管理错误分类、严重度与对外文案.
"""

from enum import Enum


class LogLevel(Enum):
    """日志级别枚举."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    BUSINESS = "business"
    DATABASE = "database"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# 错误消息常量
class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    RESOURCE_NOT_FOUND = "资源不存在"
    INVALID_REQUEST = "无效的请求"
    REQUEST_DATA_EMPTY = "请求数据不能为空"

    # 参数表单
    UNKNOWN_SCHEMA = "未注册的参数表单: {schema}"
    UNKNOWN_FIELD = "参数表单 {schema} 不包含字段: {field}"
    PARAMETERS_INVALID = "Error!"

    # 存储错误
    DATABASE_QUERY_ERROR = "数据库查询错误"
    STORAGE_WRITE_FAILED = "参数保存失败,请稍后再试"


# 成功消息常量
class SuccessMessages:
    """成功消息常量."""

    OPERATION_SUCCESS = "操作成功"
    FEATURES_SAVED = "Nissan Leaf feature configuration saved."
    BATTERY_SAVED = "Nissan Leaf battery setup saved."


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "LogLevel",
    "SuccessMessages",
]

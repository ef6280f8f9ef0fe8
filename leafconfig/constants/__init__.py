"""常量模块。

集中管理系统常量,包括错误消息、HTTP 相关常量与车型默认参数。

主要常量：
- ErrorMessages / SuccessMessages: 对外文案
- HttpStatus: HTTP 状态码常量
- HttpHeaders: HTTP 头常量
- CONFIG_NAMESPACE: 参数存储命名空间
"""

# 导入所有系统常量
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    LogLevel,
    SuccessMessages,
)

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

# 导入HTTP头常量
from .http_headers import HttpHeaders

# 导入车型默认参数
from .vehicle_defaults import CONFIG_NAMESPACE, EV_REQUEST_PORTS

# 导出所有常量
__all__ = [
    "CONFIG_NAMESPACE",
    "EV_REQUEST_PORTS",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    # HTTP头
    "HttpHeaders",
    # HTTP状态码
    "HttpStatus",
    # 系统常量
    "LogLevel",
    "SuccessMessages",
]

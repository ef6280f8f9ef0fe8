"""工具模块.

主要工具:
- structlog_config: 结构化日志配置与统一错误封套
- response_utils: 统一成功/错误响应
- route_safety: 路由层异常兜底与日志
- time_utils: 时间处理工具
"""

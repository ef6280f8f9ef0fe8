"""服务层模块.

提供参数表单处理、参数存储协议与仪表盘配置等业务逻辑.

主要模块:
- form_service: 参数表单处理服务
- config_store: 参数存储协议与进程内实现
- dashboard: 仪表盘配置服务
"""

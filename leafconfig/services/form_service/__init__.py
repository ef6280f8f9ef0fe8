"""表单服务模块.

提供参数表单的字段规格、校验与原子提交.

主要服务:
- ParameterFormProcessor: 参数表单处理器
- SchemaRegistry: 参数表单注册表
"""

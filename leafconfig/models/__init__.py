"""数据模型模块.

主要模型:
- ConfigParam: 按命名空间持久化的参数值
"""

__all__ = [
    "ConfigParam",
]


def __getattr__(name: str):
    """延迟加载模型, 避免初始化周期引发的循环导入."""

    if name not in __all__:
        msg = f"module 'leafconfig.models' has no attribute {name}"
        raise AttributeError(msg)

    from importlib import import_module

    module_map = {
        "ConfigParam": "leafconfig.models.config_param",
    }

    module = import_module(module_map[name])
    value = getattr(module, name)
    globals()[name] = value
    return value

"""统一时间处理工具模块.

参数存储与响应封套统一使用 UTC 时间.
"""

from datetime import UTC, date, datetime


class TimeUtils:
    """统一时间处理工具类."""

    @staticmethod
    def now() -> datetime:
        """获取当前 UTC 时间.

        Returns:
            带 UTC 时区信息的当前时间.

        """
        return datetime.now(UTC)

    @staticmethod
    def to_json_serializable(dt: str | date | datetime | None) -> str | None:
        """转换时间对象为 JSON 可序列化的 ISO 字符串.

        Args:
            dt: 字符串、date 或 datetime 实例.

        Returns:
            ISO 格式字符串;若无法转换则返回 None.

        """
        if not dt:
            return None
        if isinstance(dt, str):
            return dt
        return dt.isoformat()


time_utils = TimeUtils()


def now() -> datetime:
    """模型默认值使用的当前时间."""
    return time_utils.now()

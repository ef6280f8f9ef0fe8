"""HTTP头常量.

定义表单提交与请求追踪用到的HTTP头名称，避免魔法字符串。
"""


class HttpHeaders:
    """HTTP头常量."""

    CONTENT_TYPE = "Content-Type"

    # 请求追踪
    X_REQUEST_ID = "X-Request-ID"

    class ContentType:
        """Content-Type常用值."""

        APPLICATION_JSON = "application/json"
        APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"
        MULTIPART_FORM_DATA = "multipart/form-data"

    @classmethod
    def is_json(cls, content_type: str | None) -> bool:
        """判断Content-Type是否为JSON.

        Args:
            content_type: Content-Type头的值

        Returns:
            bool: 是否为JSON类型

        """
        if not content_type:
            return False
        return cls.ContentType.APPLICATION_JSON in content_type.lower()

    @classmethod
    def is_form(cls, content_type: str | None) -> bool:
        """判断Content-Type是否为表单."""
        if not content_type:
            return False
        ct_lower = content_type.lower()
        return (
            cls.ContentType.APPLICATION_FORM_URLENCODED in ct_lower
            or cls.ContentType.MULTIPART_FORM_DATA in ct_lower
        )

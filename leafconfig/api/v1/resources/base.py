"""Base Resource helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, cast

from flask import Response, current_app
from flask_restx import Resource

from leafconfig import PROCESSOR_EXTENSION_KEY
from leafconfig.utils.response_utils import jsonify_unified_success
from leafconfig.utils.route_safety import safe_route_call

if TYPE_CHECKING:
    from leafconfig.services.form_service.parameter_form_service import ParameterFormProcessor
    from leafconfig.types import ContextDict, JsonValue, LoggerExtra, RouteSafetyOptions

R = TypeVar("R")


class BaseResource(Resource):
    """统一封套与 safe_route_call 适配."""

    def success(
        self,
        data: object | None = None,
        message: object | None = None,
        *,
        status: int = 200,
        meta: Mapping[str, object] | None = None,
    ) -> Response:
        response, status_code = jsonify_unified_success(data=data, message=message, status=status, meta=meta)
        response.status_code = status_code
        return response

    def safe_call(
        self,
        func: Callable[[], R],
        *,
        module: str,
        action: str,
        public_error: str,
        context: ContextDict | None = None,
        extra: LoggerExtra | None = None,
        **options: RouteSafetyOptions,
    ) -> R:
        return safe_route_call(
            func,
            module=module,
            action=action,
            public_error=public_error,
            context=cast("ContextDict | None", context),
            extra=cast("dict[str, JsonValue] | None", extra),
            **cast("dict[str, Any]", options),
        )

    @staticmethod
    def processor() -> ParameterFormProcessor:
        """返回应用上注册的参数表单处理器."""
        return cast("ParameterFormProcessor", current_app.extensions[PROCESSOR_EXTENSION_KEY])

"""Nissan Leaf 参数表单 namespace.

- GET  /xnl                  已注册的参数表单列表
- GET  /xnl/dashboard        仪表配置
- GET  /xnl/<schema>         表单当前值
- POST /xnl/<schema>         整批校验并提交
"""

from __future__ import annotations

from collections.abc import Mapping

from flask import request
from flask_restx import Namespace, fields

from leafconfig.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from leafconfig.api.v1.resources.base import BaseResource
from leafconfig.constants import HttpHeaders
from leafconfig.constants.system_constants import ErrorMessages
from leafconfig.errors import ValidationError
from leafconfig.services.config_store import encode_bool
from leafconfig.services.dashboard.dashboard_config_service import DashboardConfigService
from leafconfig.types import SubmittedValues

ns = Namespace("xnl", description="Nissan Leaf 参数表单")

ErrorEnvelope = get_error_envelope_model(ns)

SchemaListData = ns.model(
    "ParameterSchemaListData",
    {
        "schemas": fields.List(fields.String, description="表单名称", example=["features", "battery"]),
    },
)

ParameterValuesData = ns.model(
    "ParameterValuesData",
    {
        "schema": fields.String(required=True, description="表单名称", example="battery"),
        "namespace": fields.String(required=True, description="存储命名空间", example="xnl"),
        "title": fields.String(required=False, description="表单标题"),
        "values": fields.Raw(required=True, description="存储键 -> 当前值", example={"suffsoc": "80"}),
        "form": fields.Raw(required=False, description="表单变量名 -> 当前值", example={"chgnoteonly": "no"}),
    },
)

GaugeBand = ns.model(
    "GaugePlotBand",
    {
        "from": fields.Float(required=True),
        "to": fields.Float(required=True),
        "className": fields.String(required=True, example="green-band"),
    },
)

Gauge = ns.model(
    "Gauge",
    {
        "key": fields.String(required=True, example="speed"),
        "label": fields.String(required=True, example="Speed"),
        "min": fields.Float(required=True),
        "max": fields.Float(required=True),
        "tickInterval": fields.Float(required=False),
        "plotBands": fields.List(fields.Nested(GaugeBand)),
    },
)

DashboardData = ns.model(
    "DashboardConfigData",
    {
        "gauges": fields.List(fields.Nested(Gauge)),
        "gaugeset1": fields.String(description="前端仪表组件配置片段"),
    },
)

SchemaListSuccessEnvelope = make_success_envelope_model(ns, "ParameterSchemaListSuccessEnvelope", SchemaListData)
ParameterValuesSuccessEnvelope = make_success_envelope_model(ns, "ParameterValuesSuccessEnvelope", ParameterValuesData)
DashboardSuccessEnvelope = make_success_envelope_model(ns, "DashboardConfigSuccessEnvelope", DashboardData)

ParameterSubmitPayload = ns.model(
    "ParameterSubmitPayload",
    {
        "modelyear": fields.String(required=False, example="2016"),
        "cfg_ev_request_port": fields.String(required=False, example="1"),
        "suffsoc": fields.String(required=False, example="80"),
        "chgnoteonly": fields.String(required=False, example="no"),
    },
)


def _as_submitted_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return encode_bool(value)
    return str(value)


def _parse_submitted_values() -> SubmittedValues:
    """读取 JSON 或表单提交,统一为 名称 -> 字符串."""
    if HttpHeaders.is_json(request.content_type):
        payload = request.get_json(silent=True)
        if not isinstance(payload, Mapping):
            raise ValidationError(ErrorMessages.REQUEST_DATA_EMPTY, message_key="REQUEST_DATA_EMPTY")
        return {str(key): _as_submitted_text(value) for key, value in payload.items()}
    return request.form.to_dict(flat=True)


@ns.route("")
class ParameterSchemasResource(BaseResource):
    """参数表单列表资源."""

    @ns.response(200, "OK", SchemaListSuccessEnvelope)
    def get(self):
        """列出已注册的参数表单."""
        return self.success({"schemas": list(self.processor().registry.names())})


@ns.route("/dashboard")
class DashboardConfigResource(BaseResource):
    """仪表配置资源."""

    @ns.response(200, "OK", DashboardSuccessEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self):
        """获取仪表刻度与色带配置."""
        return self.safe_call(
            lambda: self.success(DashboardConfigService().get_dashboard_config()),
            module="parameter_forms",
            action="get_dashboard_config",
            public_error="获取仪表配置失败",
        )


@ns.route("/<string:schema>")
@ns.param("schema", "参数表单名称(features/battery)")
class ParameterFormResource(BaseResource):
    """参数表单资源."""

    @ns.response(200, "OK", ParameterValuesSuccessEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    def get(self, schema: str):
        """读取表单当前值,缺失字段返回默认值."""

        def _execute():
            processor = self.processor()
            form_schema = processor.get_schema(schema)
            return self.success(
                data={
                    "schema": form_schema.name,
                    "namespace": form_schema.namespace,
                    "title": form_schema.title,
                    "values": processor.read(form_schema),
                    "form": processor.form_values(form_schema),
                },
            )

        return self.safe_call(
            _execute,
            module="parameter_forms",
            action="read_parameters",
            public_error="读取参数失败",
            context={"schema": schema},
        )

    @ns.expect(ParameterSubmitPayload, validate=False)
    @ns.response(200, "OK", ParameterValuesSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def post(self, schema: str):
        """整批校验并提交参数,任一字段失败时不写入任何值."""

        def _execute():
            processor = self.processor()
            form_schema = processor.get_schema(schema)
            result = processor.submit(form_schema.name, _parse_submitted_values())
            if not result.success:
                raise ValidationError(
                    result.message or ErrorMessages.PARAMETERS_INVALID,
                    message_key=result.message_key or "PARAMETERS_INVALID",
                    extra={"errors": [error.to_dict() for error in result.errors]},
                )
            return self.success(
                data={
                    "schema": form_schema.name,
                    "namespace": form_schema.namespace,
                    "title": form_schema.title,
                    "values": result.data,
                },
                message=result.message,
            )

        return self.safe_call(
            _execute,
            module="parameter_forms",
            action="submit_parameters",
            public_error="参数保存失败",
            context={"schema": schema},
        )

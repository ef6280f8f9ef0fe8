"""参数表单注册表.

定义 Nissan Leaf 的两个参数表单(功能配置与电池配置),并提供按名称查找.
表单在启动时构造一次,进程生命周期内不再变化.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from leafconfig.constants.system_constants import SuccessMessages
from leafconfig.constants.vehicle_defaults import (
    CONFIG_NAMESPACE,
    DEFAULT_CABINTEMP_OFFSET,
    DEFAULT_MODEL_YEAR,
    DEFAULT_PIN_EV,
    EV_REQUEST_PORTS,
    GEN_1_NEW_CAR_AH,
    GEN_1_NEW_CAR_GIDS,
    MIN_MODEL_YEAR,
    SOC_PERCENT_MAX,
    SOC_PERCENT_MIN,
    SUFF_RANGE_CALC_OPTIONS,
)
from leafconfig.errors import UnknownFieldError, UnknownSchemaError
from leafconfig.services.form_service.field_spec import BOOL_FALSE, BOOL_TRUE, FieldKind, FieldSpec

if TYPE_CHECKING:
    from leafconfig.settings import Settings

FEATURES_SCHEMA = "features"
BATTERY_SCHEMA = "battery"


@dataclass(frozen=True, slots=True)
class Schema:
    """有序的字段集合,对应一个配置表单.

    Attributes:
        name: 注册表中的表单名称.
        namespace: 参数存储命名空间.
        fields: 按表单顺序排列的字段规格.
        title: 表单标题.
        success_message: 保存成功后的提示.

    """

    name: str
    namespace: str
    fields: tuple[FieldSpec, ...]
    title: str = ""
    success_message: str = ""

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for spec in self.fields:
            if spec.name in seen:
                msg = f"表单 {self.name} 存在重复字段: {spec.name}"
                raise ValueError(msg)
            seen.add(spec.name)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def get_field(self, name: str) -> FieldSpec:
        """按存储键或表单变量名查找字段.

        Raises:
            UnknownFieldError: 字段不存在时抛出.

        """
        for spec in self.fields:
            if name in (spec.name, spec.input_name):
                return spec
        raise UnknownFieldError(self.name, name)


class SchemaRegistry:
    """表单注册表."""

    def __init__(self, schemas: Iterable[Schema] = ()) -> None:
        self._schemas: dict[str, Schema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: Schema) -> None:
        if schema.name in self._schemas:
            msg = f"表单已注册: {schema.name}"
            raise ValueError(msg)
        self._schemas[schema.name] = schema

    def get(self, name: str) -> Schema:
        """按名称获取表单.

        Raises:
            UnknownSchemaError: 未注册时抛出.

        """
        try:
            return self._schemas[name]
        except KeyError:
            raise UnknownSchemaError(name) from None

    def names(self) -> tuple[str, ...]:
        return tuple(self._schemas)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    @classmethod
    def from_settings(cls, settings: Settings) -> SchemaRegistry:
        """使用 Settings 中的车型默认值构造注册表."""
        return cls(
            [
                build_feature_schema(
                    model_year=settings.default_model_year,
                    cabintemp_offset=settings.default_cabintemp_offset,
                    pin_ev=settings.default_pin_ev,
                    new_car_gids=settings.new_car_gids,
                    new_car_ah=settings.new_car_ah,
                ),
                build_battery_schema(),
            ],
        )


def build_feature_schema(
    *,
    model_year: int = DEFAULT_MODEL_YEAR,
    cabintemp_offset: float = DEFAULT_CABINTEMP_OFFSET,
    pin_ev: str = DEFAULT_PIN_EV,
    new_car_gids: int = GEN_1_NEW_CAR_GIDS,
    new_car_ah: int = GEN_1_NEW_CAR_AH,
) -> Schema:
    """构造功能配置表单."""
    return Schema(
        name=FEATURES_SCHEMA,
        namespace=CONFIG_NAMESPACE,
        title="Nissan Leaf feature configuration",
        success_message=SuccessMessages.FEATURES_SAVED,
        fields=(
            FieldSpec(
                name="modelyear",
                kind=FieldKind.BOUNDED_INTEGER,
                default=str(model_year),
                label="Model year",
                minimum=MIN_MODEL_YEAR,
                range_message=f"Model year must be ≥ {MIN_MODEL_YEAR}",
            ),
            FieldSpec(
                name="cabintempoffset",
                kind=FieldKind.FLOAT,
                default=str(cabintemp_offset),
                label="Cabin Temperature Offset",
                required=True,
            ),
            FieldSpec(
                name="cfg_ev_request_port",
                kind=FieldKind.ENUM,
                default=pin_ev,
                label="EV SYSTEM ACTIVATION REQUEST Pin",
                options=tuple(EV_REQUEST_PORTS),
                required=True,
                empty_message="EV SYSTEM ACTIVATION REQUEST Pin field cannot be empty",
            ),
            FieldSpec(
                name="maxGids",
                input_name="maxgids",
                kind=FieldKind.INTEGER,
                default=str(new_car_gids),
                label="Maximum GIDS",
            ),
            FieldSpec(
                name="newCarAh",
                input_name="newcarah",
                kind=FieldKind.INTEGER,
                default=str(new_car_ah),
                label="New car capacity",
            ),
            FieldSpec(
                name="soc.newcar",
                input_name="socnewcar",
                kind=FieldKind.BOOLEAN,
                default=BOOL_FALSE,
                label="SOC Display",
            ),
            FieldSpec(
                name="soh.newcar",
                input_name="sohnewcar",
                kind=FieldKind.BOOLEAN,
                default=BOOL_FALSE,
                label="SOH Display",
            ),
            FieldSpec(
                name="canwrite",
                kind=FieldKind.BOOLEAN,
                default=BOOL_FALSE,
                label="Enable CAN writes",
            ),
        ),
    )


def _non_negative(name: str, label: str) -> FieldSpec:
    return FieldSpec(name=name, kind=FieldKind.BOUNDED_FLOAT, default="0", label=label, minimum=0)


def _percent(name: str, label: str) -> FieldSpec:
    return FieldSpec(
        name=name,
        kind=FieldKind.BOUNDED_FLOAT,
        default="0",
        label=label,
        minimum=SOC_PERCENT_MIN,
        maximum=SOC_PERCENT_MAX,
    )


def build_battery_schema() -> Schema:
    """构造充放电阈值表单."""
    return Schema(
        name=BATTERY_SCHEMA,
        namespace=CONFIG_NAMESPACE,
        title="Nissan Leaf battery setup",
        success_message=SuccessMessages.BATTERY_SAVED,
        fields=(
            _non_negative("suffrange", "Sufficient range"),
            FieldSpec(
                name="suffrangecalc",
                kind=FieldKind.ENUM,
                default=SUFF_RANGE_CALC_OPTIONS[0],
                label="Sufficient range estimation method",
                options=SUFF_RANGE_CALC_OPTIONS,
            ),
            _percent("suffsoc", "Sufficient SOC"),
            _non_negative("rangedrop", "Allowed range drop"),
            _percent("socdrop", "Allowed SOC drop"),
            _non_negative("minrange", "Minimum range"),
            _percent("minsoc", "Minimum SOC"),
            FieldSpec(
                name="autocharge",
                input_name="chgnoteonly",
                kind=FieldKind.BOOLEAN,
                default=BOOL_TRUE,
                label="Notify only",
                negate_input=True,
            ),
        ),
    )


def build_default_registry() -> SchemaRegistry:
    """使用内置车型默认值构造注册表."""
    return SchemaRegistry([build_feature_schema(), build_battery_schema()])


__all__ = [
    "BATTERY_SCHEMA",
    "FEATURES_SCHEMA",
    "Schema",
    "SchemaRegistry",
    "build_battery_schema",
    "build_default_registry",
    "build_feature_schema",
]

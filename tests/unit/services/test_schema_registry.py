import pytest

from leafconfig.constants.vehicle_defaults import CONFIG_NAMESPACE
from leafconfig.errors import NotFoundError, UnknownFieldError, UnknownSchemaError
from leafconfig.services.form_service.field_spec import FieldKind, FieldSpec
from leafconfig.services.form_service.schema_registry import (
    BATTERY_SCHEMA,
    FEATURES_SCHEMA,
    Schema,
    SchemaRegistry,
    build_battery_schema,
    build_default_registry,
    build_feature_schema,
)
from leafconfig.settings import Settings


@pytest.mark.unit
def test_default_registry_contains_both_forms() -> None:
    registry = build_default_registry()

    assert registry.names() == (FEATURES_SCHEMA, BATTERY_SCHEMA)
    assert FEATURES_SCHEMA in registry
    assert "unknown" not in registry


@pytest.mark.unit
def test_both_forms_share_vehicle_namespace() -> None:
    registry = build_default_registry()

    assert registry.get(FEATURES_SCHEMA).namespace == CONFIG_NAMESPACE
    assert registry.get(BATTERY_SCHEMA).namespace == CONFIG_NAMESPACE


@pytest.mark.unit
def test_feature_form_field_order_and_storage_keys() -> None:
    schema = build_feature_schema()

    assert schema.field_names == (
        "modelyear",
        "cabintempoffset",
        "cfg_ev_request_port",
        "maxGids",
        "newCarAh",
        "soc.newcar",
        "soh.newcar",
        "canwrite",
    )
    assert [spec.input_name for spec in schema] == [
        "modelyear",
        "cabintempoffset",
        "cfg_ev_request_port",
        "maxgids",
        "newcarah",
        "socnewcar",
        "sohnewcar",
        "canwrite",
    ]


@pytest.mark.unit
def test_battery_form_fields_and_defaults() -> None:
    schema = build_battery_schema()

    defaults = {spec.name: spec.default for spec in schema}

    assert defaults == {
        "suffrange": "0",
        "suffrangecalc": "ideal",
        "suffsoc": "0",
        "rangedrop": "0",
        "socdrop": "0",
        "minrange": "0",
        "minsoc": "0",
        "autocharge": "yes",
    }


@pytest.mark.unit
def test_autocharge_is_derived_from_notify_only_input() -> None:
    spec = build_battery_schema().get_field("chgnoteonly")

    assert spec.name == "autocharge"
    assert spec.kind is FieldKind.BOOLEAN
    assert spec.negate_input is True
    assert spec.is_derived


@pytest.mark.unit
def test_unknown_schema_lookup_raises_not_found() -> None:
    registry = build_default_registry()

    with pytest.raises(UnknownSchemaError) as exc_info:
        registry.get("climate")

    assert isinstance(exc_info.value, NotFoundError)
    assert exc_info.value.status_code == 404
    assert exc_info.value.extra == {"schema": "climate"}


@pytest.mark.unit
def test_unknown_field_lookup_raises_not_found() -> None:
    with pytest.raises(UnknownFieldError) as exc_info:
        build_feature_schema().get_field("turbo")

    assert exc_info.value.field == "turbo"
    assert exc_info.value.status_code == 404


@pytest.mark.unit
def test_duplicate_schema_registration_is_rejected() -> None:
    registry = SchemaRegistry([build_battery_schema()])

    with pytest.raises(ValueError, match="battery"):
        registry.register(build_battery_schema())


@pytest.mark.unit
def test_duplicate_field_names_are_rejected() -> None:
    field = FieldSpec(name="x", kind=FieldKind.STRING, default="")

    with pytest.raises(ValueError, match="重复字段"):
        Schema(name="dup", namespace="test", fields=(field, field))


@pytest.mark.unit
def test_enum_field_requires_options() -> None:
    with pytest.raises(ValueError, match="可选值"):
        FieldSpec(name="mode", kind=FieldKind.ENUM, default="")


@pytest.mark.unit
def test_negated_input_only_allowed_for_booleans() -> None:
    with pytest.raises(ValueError, match="布尔"):
        FieldSpec(name="level", kind=FieldKind.INTEGER, default="0", negate_input=True)


@pytest.mark.unit
def test_registry_from_settings_applies_vehicle_defaults(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_MODEL_YEAR", "2018")
    monkeypatch.setenv("DEFAULT_PIN_EV", "4")
    monkeypatch.setenv("NEW_CAR_GIDS", "502")
    monkeypatch.setenv("NEW_CAR_AH", "115")

    registry = SchemaRegistry.from_settings(Settings.load())
    defaults = {spec.name: spec.default for spec in registry.get(FEATURES_SCHEMA)}

    assert defaults["modelyear"] == "2018"
    assert defaults["cfg_ev_request_port"] == "4"
    assert defaults["maxGids"] == "502"
    assert defaults["newCarAh"] == "115"
    assert defaults["cabintempoffset"] == "0.0"

import threading
import time

import pytest

from leafconfig.constants.vehicle_defaults import CONFIG_NAMESPACE
from leafconfig.errors import StorageError, UnknownSchemaError
from leafconfig.services.config_store import InMemoryConfigStore
from leafconfig.services.form_service.field_spec import ValidatedBatch
from leafconfig.services.form_service.parameter_form_service import ParameterFormProcessor
from leafconfig.services.form_service.schema_registry import (
    BATTERY_SCHEMA,
    FEATURES_SCHEMA,
    build_default_registry,
)

VALID_BATTERY = {
    "suffrange": "150",
    "suffrangecalc": "est",
    "suffsoc": "80",
    "rangedrop": "5",
    "socdrop": "2.5",
    "minrange": "20",
    "minsoc": "10",
    "chgnoteonly": "no",
}

VALID_FEATURES = {
    "modelyear": "2016",
    "cabintempoffset": "-1.5",
    "cfg_ev_request_port": "3",
    "maxgids": "356",
    "newcarah": "79",
    "socnewcar": "yes",
    "sohnewcar": "no",
    "canwrite": "yes",
}


@pytest.mark.unit
def test_submit_valid_battery_form_commits_every_field(processor, memory_store) -> None:
    result = processor.submit(BATTERY_SCHEMA, VALID_BATTERY)

    assert result.success is True
    assert result.message == "Nissan Leaf battery setup saved."
    assert memory_store.snapshot(CONFIG_NAMESPACE) == {
        "suffrange": "150",
        "suffrangecalc": "est",
        "suffsoc": "80",
        "rangedrop": "5",
        "socdrop": "2.5",
        "minrange": "20",
        "minsoc": "10",
        "autocharge": "yes",
    }
    assert result.data == memory_store.snapshot(CONFIG_NAMESPACE)


@pytest.mark.unit
def test_submit_valid_feature_form_maps_input_names_to_storage_keys(processor, memory_store) -> None:
    result = processor.submit(FEATURES_SCHEMA, VALID_FEATURES)

    assert result.success is True
    assert result.message == "Nissan Leaf feature configuration saved."
    stored = memory_store.snapshot(CONFIG_NAMESPACE)
    assert stored["maxGids"] == "356"
    assert stored["newCarAh"] == "79"
    assert stored["soc.newcar"] == "yes"
    assert stored["soh.newcar"] == "no"
    assert stored["canwrite"] == "yes"
    assert "maxgids" not in stored


@pytest.mark.unit
def test_storage_key_is_accepted_when_input_name_missing(processor, memory_store) -> None:
    submitted = {**VALID_FEATURES}
    submitted.pop("maxgids")
    submitted["maxGids"] = "502"

    result = processor.submit(FEATURES_SCHEMA, submitted)

    assert result.success is True
    assert memory_store.get_param_value(CONFIG_NAMESPACE, "maxGids") == "502"


@pytest.mark.unit
@pytest.mark.parametrize(("notify_only", "autocharge"), [("yes", "no"), ("no", "yes"), ("", "yes")])
def test_autocharge_is_stored_as_negation_of_notify_only(processor, memory_store, notify_only, autocharge) -> None:
    processor.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "chgnoteonly": notify_only})

    assert memory_store.get_param_value(CONFIG_NAMESPACE, "autocharge") == autocharge


@pytest.mark.unit
def test_missing_notify_only_enables_autocharge(processor, memory_store) -> None:
    submitted = {key: value for key, value in VALID_BATTERY.items() if key != "chgnoteonly"}

    processor.submit(BATTERY_SCHEMA, submitted)

    assert memory_store.get_param_value_bool(CONFIG_NAMESPACE, "autocharge") is True


@pytest.mark.unit
def test_invalid_submission_leaves_store_untouched(processor, memory_store) -> None:
    memory_store.set_param_values(CONFIG_NAMESPACE, {"suffsoc": "50", "minrange": "10"})
    before = memory_store.snapshot(CONFIG_NAMESPACE)

    result = processor.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "suffsoc": "150"})

    assert result.success is False
    assert result.data is None
    assert memory_store.snapshot(CONFIG_NAMESPACE) == before


@pytest.mark.unit
def test_all_errors_are_reported_in_form_order(processor) -> None:
    submitted = {
        **VALID_BATTERY,
        "minsoc": "101",
        "suffrange": "-1",
        "suffrangecalc": "guess",
    }

    result = processor.submit(BATTERY_SCHEMA, submitted)

    assert result.success is False
    assert result.message_key == "PARAMETERS_INVALID"
    assert [error.to_dict() for error in result.errors] == [
        {"field": "suffrange", "message": "Sufficient range invalid, must be ≥ 0"},
        {"field": "suffrangecalc", "message": "Sufficient range estimation method invalid selection"},
        {"field": "minsoc", "message": "Minimum SOC invalid, must be 0…100"},
    ]


@pytest.mark.unit
def test_feature_errors_use_input_names(processor) -> None:
    result = processor.submit(
        FEATURES_SCHEMA,
        {**VALID_FEATURES, "modelyear": "2000", "cabintempoffset": "", "cfg_ev_request_port": "2"},
    )

    assert [(error.field, error.message) for error in result.errors] == [
        ("modelyear", "Model year must be ≥ 2011"),
        ("cabintempoffset", "Cabin Temperature Offset can not be empty"),
        ("cfg_ev_request_port", "EV SYSTEM ACTIVATION REQUEST Pin invalid selection"),
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        (
            {"modelyear": "2005", "cfg_ev_request_port": ""},
            [
                ("modelyear", "Model year must be ≥ 2011"),
                ("cfg_ev_request_port", "EV SYSTEM ACTIVATION REQUEST Pin field cannot be empty"),
            ],
        ),
        ({"cfg_ev_request_port": "99"}, [("cfg_ev_request_port", "EV SYSTEM ACTIVATION REQUEST Pin invalid selection")]),
    ],
)
def test_feature_submission_reports_exact_errors(processor, memory_store, overrides, expected) -> None:
    result = processor.submit(FEATURES_SCHEMA, {**VALID_FEATURES, **overrides})

    assert result.success is False
    assert [(error.field, error.message) for error in result.errors] == expected
    assert memory_store.snapshot(CONFIG_NAMESPACE) == {}


@pytest.mark.unit
def test_battery_submission_rejects_soc_just_above_full(processor, memory_store) -> None:
    result = processor.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "suffsoc": "100.1"})

    assert [(error.field, error.message) for error in result.errors] == [
        ("suffsoc", "Sufficient SOC invalid, must be 0…100"),
    ]
    assert memory_store.snapshot(CONFIG_NAMESPACE) == {}


@pytest.mark.unit
def test_validate_never_touches_store() -> None:
    class _ReadOnlyStore(InMemoryConfigStore):
        def set_param_values(self, namespace, values):  # noqa: ANN001
            raise AssertionError("validate 不应写入存储")

    processor = ParameterFormProcessor(_ReadOnlyStore(), build_default_registry())
    schema = processor.get_schema(BATTERY_SCHEMA)

    valid = processor.validate(schema, VALID_BATTERY)
    invalid = processor.validate(schema, {**VALID_BATTERY, "socdrop": "-1"})

    assert valid.success is True
    assert isinstance(valid.data, ValidatedBatch)
    assert valid.data.schema_name == BATTERY_SCHEMA
    assert invalid.success is False
    assert [error.field for error in invalid.errors] == ["socdrop"]


@pytest.mark.unit
def test_read_returns_defaults_for_missing_keys(processor) -> None:
    features = processor.read(processor.get_schema(FEATURES_SCHEMA))
    battery = processor.read(processor.get_schema(BATTERY_SCHEMA))

    assert features == {
        "modelyear": "2012",
        "cabintempoffset": "0.0",
        "cfg_ev_request_port": "1",
        "maxGids": "281",
        "newCarAh": "66",
        "soc.newcar": "no",
        "soh.newcar": "no",
        "canwrite": "no",
    }
    assert battery["suffrangecalc"] == "ideal"
    assert battery["autocharge"] == "yes"
    assert battery["suffsoc"] == "0"


@pytest.mark.unit
def test_empty_values_are_stored_verbatim(processor, memory_store) -> None:
    processor.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "suffrange": "", "suffrangecalc": ""})

    values = processor.read(processor.get_schema(BATTERY_SCHEMA))

    assert memory_store.has_param(CONFIG_NAMESPACE, "suffrange")
    assert values["suffrange"] == ""
    assert values["suffrangecalc"] == ""


@pytest.mark.unit
def test_read_after_commit_returns_committed_values(processor) -> None:
    processor.submit(FEATURES_SCHEMA, VALID_FEATURES)

    values = processor.read(processor.get_schema(FEATURES_SCHEMA))

    assert values["modelyear"] == "2016"
    assert values["cabintempoffset"] == "-1.5"
    assert values["cfg_ev_request_port"] == "3"


@pytest.mark.unit
def test_form_values_are_keyed_by_input_name_with_derived_inverted(processor) -> None:
    processor.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "chgnoteonly": "yes"})
    schema = processor.get_schema(BATTERY_SCHEMA)

    stored = processor.read(schema)
    form = processor.form_values(schema)

    assert stored["autocharge"] == "no"
    assert form["chgnoteonly"] == "yes"
    assert "autocharge" not in form


@pytest.mark.unit
@pytest.mark.parametrize(
    ("stored_autocharge", "notify_only"),
    [("yes", "no"), ("true", "no"), ("1", "no"), ("no", "yes"), ("0", "yes"), ("", "no")],
)
def test_form_values_decode_stored_autocharge_like_store_reads(memory_store, processor, stored_autocharge, notify_only) -> None:
    memory_store.set_param_value(CONFIG_NAMESPACE, "autocharge", stored_autocharge)

    form = processor.form_values(processor.get_schema(BATTERY_SCHEMA))

    assert form["chgnoteonly"] == notify_only


@pytest.mark.unit
def test_read_uses_single_snapshot_while_commit_interleaves() -> None:
    class _InterleavingStore(InMemoryConfigStore):
        def __init__(self) -> None:
            super().__init__()
            self.on_read = None

        def get_param_value(self, namespace, key, default=""):  # noqa: ANN001
            if key == "suffsoc" and self.on_read is not None:
                hook, self.on_read = self.on_read, None
                hook()
            return super().get_param_value(namespace, key, default)

    store = _InterleavingStore()
    interleaved = ParameterFormProcessor(store, build_default_registry())
    interleaved.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "suffsoc": "10", "minsoc": "10"})
    store.on_read = lambda: interleaved.submit(BATTERY_SCHEMA, {**VALID_BATTERY, "suffsoc": "90", "minsoc": "90"})

    values = interleaved.read(interleaved.get_schema(BATTERY_SCHEMA))

    assert values["suffsoc"] == values["minsoc"]


@pytest.mark.unit
def test_commit_rejects_batch_from_other_form(processor) -> None:
    battery = processor.get_schema(BATTERY_SCHEMA)
    features = processor.get_schema(FEATURES_SCHEMA)
    batch = processor.validate(battery, VALID_BATTERY).data

    with pytest.raises(ValueError, match="battery"):
        processor.commit(features, batch)


@pytest.mark.unit
def test_commit_rejects_incomplete_batch(processor, memory_store) -> None:
    schema = processor.get_schema(BATTERY_SCHEMA)
    full = processor.validate(schema, VALID_BATTERY).data
    partial = ValidatedBatch(
        schema_name=BATTERY_SCHEMA,
        values={name: value for name, value in full.values.items() if name != "minsoc"},
    )

    with pytest.raises(ValueError, match="minsoc"):
        processor.commit(schema, partial)

    assert memory_store.snapshot(CONFIG_NAMESPACE) == {}


@pytest.mark.unit
def test_submit_unknown_form_raises(processor) -> None:
    with pytest.raises(UnknownSchemaError):
        processor.submit("climate", {})


@pytest.mark.unit
def test_storage_failure_propagates_without_partial_write() -> None:
    class _FailingStore(InMemoryConfigStore):
        def set_param_values(self, namespace, values):  # noqa: ANN001
            raise StorageError(extra={"namespace": namespace})

    store = _FailingStore()
    processor = ParameterFormProcessor(store, build_default_registry())

    with pytest.raises(StorageError):
        processor.submit(BATTERY_SCHEMA, VALID_BATTERY)

    assert store.snapshot(CONFIG_NAMESPACE) == {}


@pytest.mark.unit
def test_commits_in_same_namespace_are_serialized() -> None:
    class _TrackingStore(InMemoryConfigStore):
        def __init__(self) -> None:
            super().__init__()
            self.active = 0
            self.max_active = 0
            self.guard = threading.Lock()

        def set_param_values(self, namespace, values):  # noqa: ANN001
            with self.guard:
                self.active += 1
                self.max_active = max(self.max_active, self.active)
            time.sleep(0.01)
            super().set_param_values(namespace, values)
            with self.guard:
                self.active -= 1

    store = _TrackingStore()
    processor = ParameterFormProcessor(store, build_default_registry())
    batches = [{**VALID_BATTERY, "suffsoc": str(value), "minsoc": str(value)} for value in range(10, 90, 10)]

    threads = [threading.Thread(target=processor.submit, args=(BATTERY_SCHEMA, batch)) for batch in batches]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stored = store.snapshot(CONFIG_NAMESPACE)
    assert store.max_active == 1
    # 最终状态必须来自同一批次
    assert stored["suffsoc"] == stored["minsoc"]

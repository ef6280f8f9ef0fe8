import pytest

from leafconfig.settings import Settings


@pytest.mark.unit
def test_vehicle_defaults_match_first_generation_pack() -> None:
    settings = Settings.load()

    assert settings.default_model_year == 2012
    assert settings.default_cabintemp_offset == 0.0
    assert settings.default_pin_ev == "1"
    assert settings.new_car_gids == 281
    assert settings.new_car_ah == 66


@pytest.mark.unit
def test_vehicle_defaults_are_exported_to_flask_config(monkeypatch) -> None:
    monkeypatch.setenv("NEW_CAR_GIDS", "356")
    monkeypatch.setenv("NEW_CAR_AH", "79")

    config = Settings.load().to_flask_config()

    assert config["NEW_CAR_GIDS"] == 356
    assert config["NEW_CAR_AH"] == 79
    assert config["TESTING"] is True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("env_name", "env_value", "message"),
    [
        ("DEFAULT_MODEL_YEAR", "2009", "DEFAULT_MODEL_YEAR 不应小于 2011"),
        ("DEFAULT_PIN_EV", "2", "DEFAULT_PIN_EV 必须为"),
        ("NEW_CAR_GIDS", "0", "NEW_CAR_GIDS 必须为正整数"),
        ("NEW_CAR_AH", "-5", "NEW_CAR_AH 必须为正整数"),
        ("LOG_LEVEL", "verbose", "LOG_LEVEL 仅支持"),
    ],
)
def test_invalid_settings_are_rejected(monkeypatch, env_name: str, env_value: str, message: str) -> None:
    monkeypatch.setenv(env_name, env_value)

    with pytest.raises(ValueError, match=message):
        Settings.load()

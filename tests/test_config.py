import pytest

from qris_service import config
from qris_service.config import Settings
from qris_service.rewriter import AmountMode


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    for name in (
        "QRIS_SERVICE_HOST", "QRIS_SERVICE_PORT", "QRIS_AMOUNT_MODE", "QRIS_ARTIFACT_TTL",
        "QRIS_SWEEP_INTERVAL", "QRIS_CACHE_MAX_ENTRIES", "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings.port == 33416
    assert settings.amount_mode is AmountMode.STATIC
    assert settings.artifact_ttl == 300
    assert settings.sweep_interval == 60
    assert settings.cache_max_entries is None
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("QRIS_SERVICE_PORT", "8080")
    monkeypatch.setenv("QRIS_AMOUNT_MODE", "Legacy")
    monkeypatch.setenv("QRIS_ARTIFACT_TTL", "120")
    monkeypatch.setenv("QRIS_CACHE_MAX_ENTRIES", "500")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.port == 8080
    assert settings.amount_mode is AmountMode.LEGACY
    assert settings.artifact_ttl == 120
    assert settings.cache_max_entries == 500
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("name, value", [
    ("QRIS_AMOUNT_MODE", "guess"),
    ("QRIS_SERVICE_PORT", "eighty"),
    ("QRIS_ARTIFACT_TTL", "0"),
])
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        Settings.from_env()

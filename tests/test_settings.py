import pytest

from app.main import create_app
from chatbot.errors import ConfigError
from config.settings import DEFAULT_API_VERSION, Settings


def test_defaults(settings):
    assert settings.azure_openai_api_version == DEFAULT_API_VERSION
    assert settings.port == 3000
    assert settings.temperature == 0.7
    assert settings.max_tokens == 1000
    assert settings.azure_openai_endpoint == "https://test-instance.openai.azure.com/"
    settings.validate()


def test_overrides(monkeypatch, settings):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("AZURE_OPENAI_API_VERSION", "2024-06-01")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

    overridden = Settings()

    assert overridden.port == 8080
    assert overridden.azure_openai_api_version == "2024-06-01"
    assert overridden.cors_origins == ["http://a.test", "http://b.test"]


def test_missing_variables_are_all_listed(monkeypatch):
    for name in (
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_INSTANCE_NAME",
        "AZURE_OPENAI_DEPLOYMENT_NAME",
    ):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ConfigError) as excinfo:
        Settings().validate()

    message = str(excinfo.value)
    assert "AZURE_OPENAI_API_KEY" in message
    assert "AZURE_OPENAI_INSTANCE_NAME" in message
    assert "AZURE_OPENAI_DEPLOYMENT_NAME" in message
    assert len(excinfo.value.missing) == 3


def test_startup_fails_without_deployment(monkeypatch, settings):
    monkeypatch.delenv("AZURE_OPENAI_DEPLOYMENT_NAME")

    with pytest.raises(ConfigError) as excinfo:
        create_app(Settings())
    assert excinfo.value.missing == ["AZURE_OPENAI_DEPLOYMENT_NAME"]

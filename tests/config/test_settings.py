from sif_functional.config.settings import ConsumerSettings


def test_defaults_when_environment_is_empty(monkeypatch):
    for name in (
        "SIF_CONSUMER_ENVIRONMENT_URL",
        "SIF_CONSUMER_APPLICATION_KEY",
        "SIF_CONSUMER_DELETE_ON_UNREGISTER",
        "SIF_CONSUMER_REQUEST_TIMEOUT",
        "SIF_CONSUMER_AUTHENTICATION_METHOD",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = ConsumerSettings.from_env()

    assert settings.environment_url is None
    assert settings.application_key is None
    assert settings.authentication_method == "Basic"
    assert settings.delete_on_unregister is False
    assert settings.request_timeout_seconds == 30.0


def test_reads_consumer_variables(monkeypatch):
    monkeypatch.setenv("SIF_CONSUMER_ENVIRONMENT_URL", "http://provider.test/api/environments/environment")
    monkeypatch.setenv("SIF_CONSUMER_APPLICATION_KEY", "gradebook")
    monkeypatch.setenv("SIF_CONSUMER_SHARED_SECRET", "s3cret")
    monkeypatch.setenv("SIF_CONSUMER_DELETE_ON_UNREGISTER", "TRUE")
    monkeypatch.setenv("SIF_CONSUMER_REQUEST_TIMEOUT", "2.5")

    settings = ConsumerSettings.from_env()

    assert settings.environment_url == "http://provider.test/api/environments/environment"
    assert settings.application_key == "gradebook"
    assert settings.shared_secret == "s3cret"
    assert settings.delete_on_unregister is True
    assert settings.request_timeout_seconds == 2.5

import logging

from participium.core.settings import DEFAULT_SESSION_SECRET, Settings
from participium.main import warn_on_insecure_settings


def test_default_secret_with_real_database_is_reported(caplog):
    config = Settings(USE_MOCK_DB=False, SESSION_SECRET=DEFAULT_SESSION_SECRET)
    with caplog.at_level(logging.WARNING, logger="participium.main"):
        assert warn_on_insecure_settings(config) is True
    assert "SESSION_SECRET" in caplog.text


def test_default_secret_with_mock_database_is_quiet(caplog):
    config = Settings(USE_MOCK_DB=True, SESSION_SECRET=DEFAULT_SESSION_SECRET)
    with caplog.at_level(logging.WARNING, logger="participium.main"):
        assert warn_on_insecure_settings(config) is False
    assert caplog.text == ""


def test_custom_secret_is_quiet():
    config = Settings(USE_MOCK_DB=False, SESSION_SECRET="a-long-private-value")
    assert config.uses_default_session_secret is False
    assert warn_on_insecure_settings(config) is False

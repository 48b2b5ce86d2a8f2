import json
import logging

import pytest
from pydantic import ValidationError

from sessionauth.core.config import INSECURE_SECRET, AppSettings
from sessionauth.core.logging import JsonLogFormatter
from sessionauth.middlewares.request_id import request_id_ctx_var


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "DB_URL", "MONGO_URI", "SESSION_SECRET", "BCRYPT_ROUNDS", "LOG_LEVEL", "PORT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_listen_on_port_3000_with_cost_10(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = AppSettings()
    assert settings.PORT == 3000
    assert settings.BCRYPT_ROUNDS == 10
    assert settings.SESSION_SECRET == INSECURE_SECRET
    assert settings.uses_insecure_secret


def test_db_url_alias_is_accepted(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DB_URL", "sqlite:///legacy.db")
    monkeypatch.setenv("SESSION_SECRET", "s3cret")
    settings = AppSettings()
    assert settings.DATABASE_URL == "sqlite:///legacy.db"
    assert not settings.uses_insecure_secret


def test_database_url_wins_over_aliases(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DB_URL", "sqlite:///legacy.db")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///primary.db")
    assert AppSettings().DATABASE_URL == "sqlite:///primary.db"


def test_mongo_uri_is_not_read_as_the_database(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/passport")
    assert AppSettings().DATABASE_URL == "sqlite:///data/sessionauth.db"


def test_non_sqlalchemy_database_url_is_a_config_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", "mongodb://localhost:27017/passport")
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        AppSettings()
    with pytest.raises(ValidationError):
        AppSettings(DATABASE_URL="not a url")


def test_invalid_bcrypt_rounds_rejected(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValidationError):
        AppSettings(BCRYPT_ROUNDS=2)


def test_log_level_is_normalised(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    assert AppSettings().LOG_LEVEL == "DEBUG"


def test_json_formatter_includes_request_id_and_extra():
    token = request_id_ctx_var.set("req-1")
    try:
        record = logging.LogRecord("sessionauth.test", logging.INFO, __file__, 1, "hello", None, None)
        record.extra_data = {"path": "/"}
        payload = json.loads(JsonLogFormatter().format(record))
    finally:
        request_id_ctx_var.reset(token)
    assert payload["message"] == "hello"
    assert payload["request_id"] == "req-1"
    assert payload["path"] == "/"
    assert payload["level"] == "INFO"

"""Unit tests for api_service/config.py"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from api_service.config import ServiceSettings


def make_settings(**overrides):
    values = {"jwt_secret": "s", "mongodb_uri": "mongodb://db:27017"}
    values.update(overrides)
    return ServiceSettings(**values)


def test_defaults(monkeypatch):
    monkeypatch.delenv("MONGO_DB_NAME", raising=False)
    settings = make_settings()

    assert settings.port == 5001
    assert settings.mongo_db_name == "job_copilot"
    assert settings.user_token_ttl == timedelta(days=5)
    assert settings.admin_token_ttl == timedelta(days=1)


def test_environment_is_normalized():
    assert make_settings(environment="PRODUCTION").is_production is True


def test_rejects_unknown_environment():
    with pytest.raises(ValidationError):
        make_settings(environment="qa")


def test_rejects_non_mongo_uri():
    with pytest.raises(ValidationError):
        make_settings(mongodb_uri="postgres://db")


def test_cors_origins_list():
    settings = make_settings(cors_origins="https://a.example, https://b.example,")
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]


def test_missing_secret_is_critical_only_in_production():
    assert make_settings(jwt_secret=None).validate_production_config()[0].startswith("WARNING")

    issues = make_settings(jwt_secret=None, environment="production").validate_production_config()
    assert issues[0].startswith("CRITICAL")

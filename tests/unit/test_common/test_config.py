"""
Configuration Unit Tests
"""

import json

import pytest

from sse_gateway.config import SETTINGS_FILE_ENV, Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.ON_LIMIT == "413"
    assert settings.SSE_AGGREGATION_MODE == "raw"
    assert settings.TLS_REJECT_UNAUTHORIZED is True
    assert settings.allowed_hosts == []


def test_allowed_hosts_parsing(make_settings):
    settings = make_settings(UPSTREAM_ALLOWED_HOSTS=" localhost, api.example.com ,,")
    assert settings.allowed_hosts == ["localhost", "api.example.com"]


def test_cors_origins(make_settings):
    assert make_settings(CORS_ALLOWED_ORIGINS="*").cors_origins == ["*"]
    settings = make_settings(CORS_ALLOWED_ORIGINS="http://a.test,http://b.test")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ON_LIMIT", "close")
    monkeypatch.setenv("SSE_MAX_BODY_BYTES", "2048")
    settings = Settings(_env_file=None)
    assert settings.ON_LIMIT == "close"
    assert settings.SSE_MAX_BODY_BYTES == 2048


def test_json_settings_file(monkeypatch, tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "LISTEN_PORT": 4000,
                "ON_LIMIT": 504,
                "UPSTREAM_ALLOWED_HOSTS": ["localhost", "127.0.0.1"],
                "SSE_AGGREGATION_MODE": "smart",
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(SETTINGS_FILE_ENV, str(path))
    settings = Settings(_env_file=None)
    assert settings.LISTEN_PORT == 4000
    assert settings.ON_LIMIT == "504"
    assert settings.allowed_hosts == ["localhost", "127.0.0.1"]
    assert settings.SSE_AGGREGATION_MODE == "smart"


def test_invalid_policy_is_rejected(make_settings):
    with pytest.raises(ValueError):
        make_settings(ON_LIMIT="418")

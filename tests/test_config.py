import pytest
from pydantic import ValidationError

from core.config import Settings


def test_auto_backend_uses_dynamodb_only_with_table():
    assert Settings(REGISTRY_BACKEND="auto", TABLE_NAME="connections").use_dynamodb
    assert not Settings(REGISTRY_BACKEND="auto", TABLE_NAME="").use_dynamodb


def test_dynamodb_backend_requires_table_name():
    with pytest.raises(ValidationError):
        Settings(REGISTRY_BACKEND="dynamodb", TABLE_NAME="")


def test_unknown_backend_is_rejected():
    with pytest.raises(ValidationError):
        Settings(REGISTRY_BACKEND="redis")


def test_fanout_concurrency_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(FANOUT_MAX_CONCURRENCY=0)


def test_cors_origins_accepts_comma_separated():
    cfg = Settings(CORS_ORIGINS="http://a.example.com, http://b.example.com")
    assert cfg.CORS_ORIGINS == ["http://a.example.com", "http://b.example.com"]

"""
Configuration Unit Tests

Environment overrides, fallbacks for unparseable values and immutability.
"""
import dataclasses

import pytest

from core.config import AuthConfig, EventBusConfig, MinIOConfig, PlatformConfig, PostgresConfig

pytestmark = [pytest.mark.unit]


def test_event_bus_defaults(monkeypatch):
    for name in ("NATS_URL", "TASK_EVENTS_TOPIC", "TASK_EVENTS_PARTITIONS", "CONSUMER_GROUP_ID"):
        monkeypatch.delenv(name, raising=False)

    config = EventBusConfig.from_env()

    assert config.task_events_topic == "task-events"
    assert config.partitions == 3
    assert config.consumer_group == "notification-group"


def test_event_bus_env_overrides(monkeypatch):
    monkeypatch.setenv("TASK_EVENTS_TOPIC", "tasks")
    monkeypatch.setenv("TASK_EVENTS_PARTITIONS", "6")
    monkeypatch.setenv("NATS_DRAIN_TIMEOUT", "5")

    config = EventBusConfig.from_env()

    assert config.task_events_topic == "tasks"
    assert config.partitions == 6
    assert config.drain_timeout == 5.0


def test_unparseable_int_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("JWT_EXPIRATION_SECONDS", "soon")

    assert AuthConfig.from_env().token_lifetime_seconds == 3600


def test_postgres_dsn(monkeypatch):
    monkeypatch.setenv("POSTGRES_HOST", "db")
    monkeypatch.setenv("POSTGRES_DB", "tasks")

    assert PostgresConfig.from_env().dsn == "postgresql://postgres:postgres@db:5432/tasks"


def test_minio_secure_flag(monkeypatch):
    monkeypatch.setenv("MINIO_SECURE", "TRUE")

    assert MinIOConfig.from_env().secure is True


def test_service_port_override(monkeypatch):
    monkeypatch.setenv("TASK_SERVICE_PORT", "9001")

    config = PlatformConfig.from_env("task_service", default_port=8081)

    assert config.service_name == "task_service"
    assert config.service_port == 9001


def test_service_port_default(monkeypatch):
    monkeypatch.delenv("NOTIFICATION_SERVICE_PORT", raising=False)
    monkeypatch.delenv("SERVICE_PORT", raising=False)

    assert PlatformConfig.from_env("notification_service", default_port=8082).service_port == 8082


def test_configs_are_frozen():
    config = PlatformConfig()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.service_port = 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.auth.jwt_secret = "changed"

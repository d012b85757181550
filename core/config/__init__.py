#!/usr/bin/env python3
"""Modular configuration system for the task hub platform

Configuration hierarchy:
- auth_config: JWT signing secret, issuer and token lifetime
- event_config: NATS JetStream topic, partitions and consumer group
- infra_config: PostgreSQL and MinIO endpoints
- logging_config: Logging configuration
- platform_config: Per-process aggregate of the above
"""
import os
from dotenv import load_dotenv
from .auth_config import AuthConfig
from .event_config import EventBusConfig
from .infra_config import MinIOConfig, PostgresConfig
from .logging_config import LoggingConfig
from .platform_config import PlatformConfig

ENV_FILES = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}


def load_settings(service_name: str = "taskhub", default_port: int = 8080) -> PlatformConfig:
    """Load the environment file for ENV and build the process settings.

    Call once at process start and pass the result to constructors.
    """
    env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
    env_file = ENV_FILES.get(env, "deployment/environments/dev.env")
    load_dotenv(env_file, override=False)
    return PlatformConfig.from_env(service_name, default_port)


__all__ = [
    'PlatformConfig',
    'load_settings',
    'AuthConfig',
    'EventBusConfig',
    'PostgresConfig',
    'MinIOConfig',
    'LoggingConfig',
]

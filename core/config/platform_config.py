#!/usr/bin/env python3
"""Platform main configuration

Combines all sub-configs into one immutable settings object that is built
once at process start and handed to the services that need it.
"""
import os
from dataclasses import dataclass, field

from .auth_config import AuthConfig
from .event_config import EventBusConfig
from .infra_config import MinIOConfig, PostgresConfig
from .logging_config import LoggingConfig

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass(frozen=True)
class PlatformConfig:
    """Settings for one service process"""

    service_name: str = "taskhub"
    service_host: str = "0.0.0.0"
    service_port: int = 8080
    environment: str = "development"
    debug: bool = False

    auth: AuthConfig = field(default_factory=AuthConfig)
    events: EventBusConfig = field(default_factory=EventBusConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    minio: MinIOConfig = field(default_factory=MinIOConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, service_name: str = "taskhub", default_port: int = 8080) -> 'PlatformConfig':
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        port_key = f"{service_name.upper()}_PORT"
        return cls(
            service_name=service_name,
            service_host=os.getenv("SERVICE_HOST", "0.0.0.0"),
            service_port=_int(os.getenv(port_key) or os.getenv("SERVICE_PORT", ""), default_port),
            environment=env,
            debug=_bool(os.getenv("DEBUG", "false")),
            auth=AuthConfig.from_env(),
            events=EventBusConfig.from_env(),
            postgres=PostgresConfig.from_env(),
            minio=MinIOConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

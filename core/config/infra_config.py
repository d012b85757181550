#!/usr/bin/env python3
"""Infrastructure services configuration

PostgreSQL and MinIO endpoints used by the task and auth services.
"""
import os
from dataclasses import dataclass

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass(frozen=True)
class PostgresConfig:
    """PostgreSQL connection settings (native asyncpg - port 5432)"""
    host: str = "localhost"
    port: int = 5432
    database: str = "taskhub"
    user: str = "postgres"
    password: str = "postgres"
    min_pool_size: int = 1
    max_pool_size: int = 10

    @property
    def dsn(self) -> str:
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"

    @classmethod
    def from_env(cls) -> 'PostgresConfig':
        return cls(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=_int(os.getenv("POSTGRES_PORT", "5432"), 5432),
            database=os.getenv("POSTGRES_DB", "taskhub"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            min_pool_size=_int(os.getenv("POSTGRES_POOL_MIN", "1"), 1),
            max_pool_size=_int(os.getenv("POSTGRES_POOL_MAX", "10"), 10),
        )


@dataclass(frozen=True)
class MinIOConfig:
    """MinIO object storage settings (native S3 - port 9000)"""
    endpoint: str = "localhost:9000"
    access_key: str = "minioadmin"
    secret_key: str = "minioadmin"
    secure: bool = False
    bucket: str = "task-attachments"
    presigned_url_ttl: int = 3600  # 1 hour

    @classmethod
    def from_env(cls) -> 'MinIOConfig':
        return cls(
            endpoint=os.getenv("MINIO_ENDPOINT", "localhost:9000"),
            access_key=os.getenv("MINIO_ACCESS_KEY", "minioadmin"),
            secret_key=os.getenv("MINIO_SECRET_KEY", "minioadmin"),
            secure=_bool(os.getenv("MINIO_SECURE", "false")),
            bucket=os.getenv("MINIO_BUCKET", "task-attachments"),
            presigned_url_ttl=_int(os.getenv("MINIO_PRESIGNED_TTL", "3600"), 3600),
        )

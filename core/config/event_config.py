#!/usr/bin/env python3
"""Event bus configuration

Topic, partitioning and consumer group settings for the task event stream.
"""
import os
from dataclasses import dataclass

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass(frozen=True)
class EventBusConfig:
    """NATS JetStream settings"""
    nats_url: str = "nats://localhost:4222"
    task_events_topic: str = "task-events"
    partitions: int = 3
    replicas: int = 1
    consumer_group: str = "notification-group"

    # Pull consumer tuning
    fetch_batch_size: int = 10
    fetch_timeout: float = 1.0
    max_stream_messages: int = 100000
    drain_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> 'EventBusConfig':
        return cls(
            nats_url=os.getenv("NATS_URL", "nats://localhost:4222"),
            task_events_topic=os.getenv("TASK_EVENTS_TOPIC", "task-events"),
            partitions=_int(os.getenv("TASK_EVENTS_PARTITIONS", "3"), 3),
            replicas=_int(os.getenv("TASK_EVENTS_REPLICAS", "1"), 1),
            consumer_group=os.getenv("CONSUMER_GROUP_ID", "notification-group"),
            fetch_batch_size=_int(os.getenv("NATS_FETCH_BATCH", "10"), 10),
            fetch_timeout=_float(os.getenv("NATS_FETCH_TIMEOUT", "1.0"), 1.0),
            max_stream_messages=_int(os.getenv("NATS_STREAM_MAX_MSGS", "100000"), 100000),
            drain_timeout=_float(os.getenv("NATS_DRAIN_TIMEOUT", "30"), 30.0),
        )

"""
NATS JetStream Event Bus for Python Microservices

Keyed, partitioned topics on top of JetStream:

- a topic is one stream whose subjects are ``<topic>.<partition>``
- the partition is derived from the message key, so every message for the
  same key lands on the same subject and keeps its order
- each consumer group owns one durable pull consumer per partition, so every
  group receives the full stream independently
"""

import asyncio
import logging
import zlib
from typing import Awaitable, Callable, Dict, List, Optional

import nats
from nats.aio.client import Client as NATS
from nats.errors import TimeoutError as NATSTimeoutError
from nats.js import JetStreamContext
from nats.js.api import AckPolicy, ConsumerConfig, DeliverPolicy, StreamConfig
from nats.js.errors import NotFoundError

from core.config.event_config import EventBusConfig

logger = logging.getLogger(__name__)

MessageHandler = Callable[[bytes], Awaitable[None]]

KEY_HEADER = "Message-Key"


class EventBusError(Exception):
    """Broker handoff or subscription failed"""


def partition_for_key(key: str, partitions: int) -> int:
    """Stable partition index for a message key"""
    if partitions < 1:
        raise ValueError("partitions must be >= 1")
    return zlib.crc32(key.encode("utf-8")) % partitions


def partition_subject(topic: str, partition: int) -> str:
    return f"{topic}.{partition}"


class NATSEventBus:
    """
    NATS JetStream event bus.

    publish() awaits the JetStream ack; subscribe() starts one pull loop per
    partition. close() lets in-flight handlers finish before draining the
    connection.
    """

    def __init__(self, config: EventBusConfig, service_name: str = "taskhub"):
        """
        Initialize NATS Event Bus.

        Args:
            config: Broker URL, partitioning and consumer tuning
            service_name: Connection name shown in NATS monitoring
        """
        self.config = config
        self.service_name = service_name

        self._nc: Optional[NATS] = None
        self._js: Optional[JetStreamContext] = None
        self._ready_streams: Dict[str, bool] = {}
        self._consumer_tasks: List[asyncio.Task] = []
        self._running = False

    async def connect(self):
        """Connect to NATS and open the JetStream context"""
        try:
            self._nc = await nats.connect(
                servers=[self.config.nats_url],
                name=self.service_name,
            )
            self._js = self._nc.jetstream()
            self._running = True
            logger.info(f"Connected to NATS at {self.config.nats_url} as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS at {self.config.nats_url}: {e}")
            raise EventBusError(f"Failed to connect to NATS: {e}") from e

    async def ensure_topic(self, topic: str):
        """Create the topic's stream if it does not exist yet (idempotent)"""
        if self._ready_streams.get(topic):
            return
        js = self._require_js()

        try:
            await js.stream_info(topic)
        except NotFoundError:
            await js.add_stream(
                StreamConfig(
                    name=topic,
                    subjects=[f"{topic}.*"],
                    num_replicas=self.config.replicas,
                    max_msgs=self.config.max_stream_messages,
                )
            )
            logger.info(
                f"Created stream {topic} with {self.config.partitions} partitions, "
                f"replicas={self.config.replicas}"
            )
        self._ready_streams[topic] = True

    async def publish(self, topic: str, key: str, payload: bytes):
        """
        Publish one message keyed by ``key``.

        Raises:
            EventBusError: not connected, or the broker did not ack
        """
        js = self._require_js()
        partition = partition_for_key(key, self.config.partitions)
        subject = partition_subject(topic, partition)

        try:
            await self.ensure_topic(topic)
            ack = await js.publish(subject, payload, headers={KEY_HEADER: key})
        except Exception as e:
            logger.error(f"Error publishing message key={key} to {subject}: {e}")
            raise EventBusError(f"Publish to {subject} failed: {e}") from e

        logger.debug(f"Published key={key} to {subject} [stream={ack.stream}, seq={ack.seq}]")

    async def subscribe(self, topic: str, group: str, handler: MessageHandler) -> int:
        """
        Subscribe a consumer group to every partition of a topic.

        Args:
            topic: Topic (stream) name
            group: Consumer group id; one durable consumer per partition
            handler: Async callback receiving the raw message payload

        Returns:
            Number of partition loops started
        """
        js = self._require_js()
        await self.ensure_topic(topic)

        for partition in range(self.config.partitions):
            subject = partition_subject(topic, partition)
            durable = f"{group}-p{partition}"
            try:
                psub = await js.pull_subscribe(
                    subject,
                    durable=durable,
                    stream=topic,
                    config=ConsumerConfig(
                        ack_policy=AckPolicy.EXPLICIT,
                        deliver_policy=DeliverPolicy.ALL,
                    ),
                )
            except Exception as e:
                raise EventBusError(f"Failed to subscribe {durable} to {subject}: {e}") from e

            task = asyncio.create_task(
                self._partition_loop(psub, handler, durable),
                name=f"consumer:{durable}",
            )
            self._consumer_tasks.append(task)

        logger.info(f"Group {group} subscribed to {topic} ({self.config.partitions} partitions)")
        return self.config.partitions

    async def _partition_loop(self, psub, handler: MessageHandler, durable: str):
        """Pull and handle messages of one partition, one at a time"""
        logger.info(f"Consumer {durable} started")
        try:
            while self._running:
                try:
                    messages = await psub.fetch(
                        batch=self.config.fetch_batch_size,
                        timeout=self.config.fetch_timeout,
                    )
                except NATSTimeoutError:
                    continue
                except Exception as e:
                    if not self._running:
                        break
                    logger.warning(f"Pull error on {durable} (will retry): {e}")
                    await asyncio.sleep(self.config.fetch_timeout)
                    continue

                for msg in messages:
                    if not self._running:
                        # Unacked messages are redelivered after ack_wait
                        break
                    await self._handle_message(msg, handler, durable)
        finally:
            logger.info(f"Consumer {durable} stopped")

    async def _handle_message(self, msg, handler: MessageHandler, durable: str):
        try:
            await handler(msg.data)
        except Exception as e:
            logger.error(f"Handler error on {durable} for {msg.subject}: {e}", exc_info=True)

        # Every outcome is acknowledged; there is no redelivery state
        try:
            await msg.ack()
        except Exception as e:
            logger.warning(f"Ack failed on {durable}: {e}")

    async def close(self, drain_timeout: float = 30.0):
        """Stop consuming, wait for in-flight handlers, then drain the connection"""
        self._running = False

        if self._consumer_tasks:
            done, pending = await asyncio.wait(self._consumer_tasks, timeout=drain_timeout)
            for task in pending:
                logger.warning(f"{task.get_name()} did not finish within {drain_timeout}s, cancelling")
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            self._consumer_tasks.clear()

        if self._nc and not self._nc.is_closed:
            await self._nc.drain()
        self._nc = None
        self._js = None
        self._ready_streams.clear()
        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        return self._nc is not None and self._nc.is_connected

    def _require_js(self) -> JetStreamContext:
        if self._js is None:
            raise EventBusError("Not connected to NATS")
        return self._js


async def create_event_bus(config: EventBusConfig, service_name: str) -> NATSEventBus:
    """Create and connect an event bus"""
    bus = NATSEventBus(config, service_name=service_name)
    await bus.connect()
    return bus


__all__ = [
    "NATSEventBus",
    "EventBusError",
    "MessageHandler",
    "create_event_bus",
    "partition_for_key",
    "partition_subject",
]

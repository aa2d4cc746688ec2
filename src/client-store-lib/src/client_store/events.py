"""
client_store.events — Best-effort publication of client domain events to RabbitMQ.

publish() never raises. With no live channel, or when the send fails, the
event is dropped and the reason logged. Delivery is at most once.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from typing import Any

import pika
from aws_lambda_powertools import Logger
from pika.exceptions import AMQPError

from client_store.exceptions import EventConnectionError, PublishError
from client_store.models import DeletionEvent, PublishOutcome

logger = Logger(service="client-store-lib")

CLIENT_EVENTS_BROKER_URL = os.environ.get("CLIENT_EVENTS_BROKER_URL", "amqp://localhost:5672/")
CLIENT_EVENTS_QUEUE = os.environ.get("CLIENT_EVENTS_QUEUE", "client-events")

_PERSISTENT_DELIVERY_MODE = 2


class RabbitMQEventPublisher:
    """Publishes events to a durable RabbitMQ queue.

    connect() is called once at bootstrap. No automatic reconnect: if the
    connection never opens, or later closes, events are dropped.
    """

    def __init__(
        self,
        *,
        broker_url: str = CLIENT_EVENTS_BROKER_URL,
        queue: str = CLIENT_EVENTS_QUEUE,
        connection_factory: Callable[[pika.URLParameters], Any] = pika.BlockingConnection,
    ) -> None:
        self.broker_url = broker_url
        self.queue = queue
        self._connection_factory = connection_factory
        self._connection: Any = None
        self._channel: Any = None

    @property
    def is_connected(self) -> bool:
        return self._channel is not None and bool(self._channel.is_open)

    def connect(self) -> None:
        """Open the connection and declare the queue as durable.

        Raises EventConnectionError; the publisher stays disconnected.
        """
        try:
            connection = self._connection_factory(pika.URLParameters(self.broker_url))
            channel = connection.channel()
            channel.queue_declare(queue=self.queue, durable=True)
        except (AMQPError, OSError, ValueError) as exc:
            raise EventConnectionError(broker_url=self.broker_url, cause=exc) from exc
        self._connection = connection
        self._channel = channel
        logger.info("Connected to RabbitMQ", queue=self.queue)

    def _send(self, body: bytes) -> None:
        try:
            self._channel.basic_publish(
                exchange="",
                routing_key=self.queue,
                body=body,
                properties=pika.BasicProperties(
                    content_type="application/json",
                    delivery_mode=_PERSISTENT_DELIVERY_MODE,
                ),
            )
        except Exception as exc:
            raise PublishError(queue=self.queue, cause=exc) from exc

    def publish(self, event: DeletionEvent) -> PublishOutcome:
        message = event.to_dict()
        if not self.is_connected:
            logger.error("Channel is not initialized", queue=self.queue, event=message)
            return PublishOutcome.dropped("channel is not initialized")
        try:
            self._send(json.dumps(message).encode("utf-8"))
        except PublishError as exc:
            logger.exception("Error publishing event to RabbitMQ", queue=self.queue, event=message)
            return PublishOutcome.dropped(str(exc))
        logger.info("Event published to RabbitMQ", queue=self.queue, event=message)
        return PublishOutcome.delivered()

"""
tests/test_bootstrap.py — Startup sequencing.

Secrets failure is fatal and must stop before any store is built; a broker
failure is logged and the service still comes up.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from client_store import bootstrap
from client_store.events import RabbitMQEventPublisher
from client_store.exceptions import EventConnectionError, SecretFetchError
from client_store.models import CredentialBundle, PublishStatus, ServiceConfig
from client_store.orchestrator import DeleteOrchestrator
from pika.exceptions import AMQPConnectionError

REGION = "us-east-2"
CREDENTIALS = CredentialBundle(
    access_key_id="AKIAEXAMPLE",
    secret_access_key="example-secret-key",  # pragma: allowlist secret
)


class FakeSecretSource:
    region = REGION

    def __init__(self, *, error: SecretFetchError | None = None) -> None:
        self.error = error
        self.calls = 0

    def fetch_secrets(self) -> CredentialBundle:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return CREDENTIALS


class RecordingStoreFactory:
    def __init__(self) -> None:
        self.configs: list[ServiceConfig] = []

    def __call__(self, config: ServiceConfig) -> Any:
        self.configs.append(config)
        return MagicMock()


def test_bootstrap_builds_store_from_fetched_credentials() -> None:
    factory = RecordingStoreFactory()
    publisher = MagicMock()

    service = bootstrap(
        secret_source=FakeSecretSource(), publisher=publisher, store_factory=factory
    )

    assert factory.configs == [ServiceConfig(region=REGION, credentials=CREDENTIALS)]
    assert service.config == factory.configs[0]
    assert isinstance(service.orchestrator, DeleteOrchestrator)
    publisher.connect.assert_called_once_with()


def test_secret_failure_is_fatal_and_builds_nothing() -> None:
    factory = RecordingStoreFactory()
    publisher = MagicMock()
    source = FakeSecretSource(error=SecretFetchError("secrets function returned status 500"))

    with pytest.raises(SecretFetchError):
        bootstrap(secret_source=source, publisher=publisher, store_factory=factory)

    assert source.calls == 1
    assert factory.configs == []
    publisher.connect.assert_not_called()


def test_broker_failure_is_not_fatal() -> None:
    publisher = MagicMock()
    publisher.connect.side_effect = EventConnectionError(
        broker_url="amqp://localhost:5672/", cause=AMQPConnectionError("refused")
    )

    service = bootstrap(
        secret_source=FakeSecretSource(),
        publisher=publisher,
        store_factory=RecordingStoreFactory(),
    )

    assert service.publisher is publisher
    assert isinstance(service.orchestrator, DeleteOrchestrator)


def test_degraded_service_still_deletes_and_drops_event() -> None:
    publisher = RabbitMQEventPublisher(
        connection_factory=MagicMock(side_effect=AMQPConnectionError("refused"))
    )
    store = MagicMock()

    service = bootstrap(
        secret_source=FakeSecretSource(), publisher=publisher, store_factory=lambda _c: store
    )
    result = service.orchestrator.delete_client("12345678")

    assert result.succeeded
    assert result.publish_outcome is not None
    assert result.publish_outcome.status is PublishStatus.DROPPED
    assert store.delete_record.call_count == 4

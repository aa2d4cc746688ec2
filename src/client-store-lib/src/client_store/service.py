"""
client_store.service — Startup sequence for the delete-client service.

    1. fetch credentials from the secret source   (SecretFetchError is fatal)
    2. build the immutable ServiceConfig
    3. construct the record store from that config
    4. connect the event publisher                (failure is logged, non-fatal)
    5. expose the orchestrator

Nothing is returned when step 1 fails, so no store is ever built without
credentials.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from aws_lambda_powertools import Logger

from client_store.events import RabbitMQEventPublisher
from client_store.exceptions import EventConnectionError, SecretFetchError
from client_store.models import CredentialBundle, ServiceConfig
from client_store.orchestrator import DeleteOrchestrator, RecordStore
from client_store.secrets import LambdaSecretSource
from client_store.storage import ClientRecordStore

logger = Logger(service="client-store-lib")


class SecretSource(Protocol):
    region: str

    def fetch_secrets(self) -> CredentialBundle: ...


@dataclass(frozen=True)
class DeleteClientService:
    config: ServiceConfig
    orchestrator: DeleteOrchestrator
    publisher: Any


def bootstrap(
    *,
    secret_source: SecretSource | None = None,
    publisher: Any = None,
    store_factory: Callable[[ServiceConfig], RecordStore] | None = None,
) -> DeleteClientService:
    """Run the startup sequence and return the ready service.

    Raises SecretFetchError if credentials cannot be fetched.
    """
    source = secret_source or LambdaSecretSource()
    try:
        credentials = source.fetch_secrets()
    except SecretFetchError:
        logger.exception("Error starting service: secrets unavailable")
        raise

    config = ServiceConfig(region=source.region, credentials=credentials)
    store = (store_factory or ClientRecordStore.from_config)(config)

    event_publisher = publisher or RabbitMQEventPublisher()
    try:
        event_publisher.connect()
    except EventConnectionError:
        logger.exception("Error connecting to RabbitMQ; ClientDeleted events will be dropped")

    logger.info("Delete client service ready", region=config.region)
    return DeleteClientService(
        config=config,
        orchestrator=DeleteOrchestrator(store, event_publisher),
        publisher=event_publisher,
    )

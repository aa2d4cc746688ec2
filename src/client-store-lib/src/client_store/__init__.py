"""
client_store — Client record deletion across the client tables.

Bootstraps credentials from the secrets Lambda, deletes a client from every
client table in a fixed order, and announces the deletion on RabbitMQ.
"""

from client_store.exceptions import (
    DeleteClientServiceError,
    EventConnectionError,
    PublishError,
    SecretFetchError,
    StorageError,
)
from client_store.models import CLIENT_TABLES, DeleteResult, DeletionEvent, PublishOutcome
from client_store.service import DeleteClientService, bootstrap

__all__ = [
    "CLIENT_TABLES",
    "DeleteClientService",
    "DeleteClientServiceError",
    "DeleteResult",
    "DeletionEvent",
    "EventConnectionError",
    "PublishError",
    "PublishOutcome",
    "SecretFetchError",
    "StorageError",
    "bootstrap",
]

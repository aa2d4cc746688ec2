"""
client_store.exceptions — Error taxonomy for the delete-client workflow.

    SecretFetchError      fatal to bootstrap; the service never becomes reachable
    EventConnectionError  non-fatal; publisher runs disconnected
    StorageError          per request; aborts the table loop
    PublishError          swallowed inside the publisher, logged only
"""

from __future__ import annotations


class DeleteClientServiceError(Exception):
    """Base class for all delete-client service errors."""


class SecretFetchError(DeleteClientServiceError):
    """Raised when the secret source cannot produce a credential bundle.

    Attributes:
        reason: Short description of the failing step.
        cause:  Underlying exception, if any.
    """

    def __init__(self, reason: str, *, cause: BaseException | None = None) -> None:
        self.reason = reason
        self.cause = cause
        message = f"Failed to fetch secrets: {reason}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


class StorageError(DeleteClientServiceError):
    """
    Raised when a delete against a single table fails.

    Covers transport, authorization and table-not-found failures. A missing
    key is not an error.

    Attributes:
        table: Table the failing delete targeted.
        cause: Underlying botocore exception.
    """

    def __init__(self, *, table: str, cause: BaseException) -> None:
        self.table = table
        self.cause = cause
        super().__init__(f"Delete from table {table!r} failed: {cause}")


class EventConnectionError(DeleteClientServiceError):
    """Raised when the message queue connection cannot be established."""

    def __init__(self, *, broker_url: str, cause: BaseException) -> None:
        self.broker_url = broker_url
        self.cause = cause
        super().__init__(f"Could not connect to message broker: {cause}")


class PublishError(DeleteClientServiceError):
    """Raised inside the publisher when a send fails. Never leaves it."""

    def __init__(self, *, queue: str, cause: BaseException) -> None:
        self.queue = queue
        self.cause = cause
        super().__init__(f"Publish to queue {queue!r} failed: {cause}")

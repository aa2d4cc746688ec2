"""
client_store.orchestrator — Multi-table client delete followed by a ClientDeleted event.

Tables are deleted strictly in CLIENT_TABLES order. The first StorageError
stops the loop: later tables are never attempted, earlier deletions are not
reverted, and no event is published. The event is published only after
every table succeeded; its outcome never changes the result.
"""

from __future__ import annotations

from typing import Protocol

from aws_lambda_powertools import Logger

from client_store.exceptions import StorageError
from client_store.models import CLIENT_TABLES, DeleteResult, DeletionEvent, PublishOutcome

logger = Logger(service="client-store-lib")


class RecordStore(Protocol):
    def delete_record(self, table_name: str, ci: str) -> None: ...


class EventPublisher(Protocol):
    def publish(self, event: DeletionEvent) -> PublishOutcome: ...


class DeleteOrchestrator:
    """Deletes a client from every client table, then announces the deletion.

    Holds no per-request state; concurrent calls for the same ci are not
    coordinated and may each publish an event.
    """

    def __init__(
        self,
        store: RecordStore,
        publisher: EventPublisher,
        *,
        tables: tuple[str, ...] = CLIENT_TABLES,
    ) -> None:
        self._store = store
        self._publisher = publisher
        self._tables = tables

    def delete_client(self, ci: str) -> DeleteResult:
        for table_name in self._tables:
            try:
                self._store.delete_record(table_name, ci)
            except StorageError as exc:
                logger.exception("Error deleting client", table=table_name, ci=ci)
                return DeleteResult.failed(table=table_name, cause=exc)

        outcome = self._publisher.publish(DeletionEvent(ci=ci))
        if not outcome.is_delivered:
            logger.warning("ClientDeleted event dropped", ci=ci, reason=outcome.reason)
        return DeleteResult.success(outcome)

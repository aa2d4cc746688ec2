"""
client_store.storage — Delete-by-key against the client tables.

Each call targets exactly one table and one key; multi-table semantics are
composed by the orchestrator. DeleteItem on an absent key succeeds, so the
caller cannot tell "removed" from "already absent".
"""

from __future__ import annotations

from typing import Any

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from client_store.exceptions import StorageError
from client_store.models import CLIENT_KEY_ATTRIBUTE, ServiceConfig

logger = Logger(service="client-store-lib")


class ClientRecordStore:
    """DynamoDB store for client records, keyed by ci."""

    def __init__(self, *, dynamodb_resource: Any) -> None:
        self._dynamodb: Any = dynamodb_resource

    @classmethod
    def from_config(cls, config: ServiceConfig) -> ClientRecordStore:
        """Build a store whose session uses the bootstrapped credentials and region."""
        session = boto3.session.Session(
            aws_access_key_id=config.credentials.access_key_id,
            aws_secret_access_key=config.credentials.secret_access_key,
            region_name=config.region,
        )
        return cls(dynamodb_resource=session.resource("dynamodb"))

    def delete_record(self, table_name: str, ci: str) -> None:
        """Delete the record keyed by ci from one table.

        Raises StorageError carrying the table name on any botocore failure,
        including ResourceNotFoundException for a missing table.
        """
        try:
            self._dynamodb.Table(table_name).delete_item(Key={CLIENT_KEY_ATTRIBUTE: ci})
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(table=table_name, cause=exc) from exc
        logger.info("Client deleted from table", table=table_name, ci=ci)

"""
client_store.models — Value types shared by the delete-client workflow.

Tables (all keyed by HASH "ci", string):
    Clients_gr8          primary client record
    ClientsUpdate_gr8    pending updates
    ClientsList_gr8      listing projection
    ClientsDelete_gr8    delete requests

Deletion order follows CLIENT_TABLES. A failure at position k leaves
positions 1..k-1 deleted and k+1..n untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

CLIENT_TABLES: tuple[str, ...] = (
    "Clients_gr8",
    "ClientsUpdate_gr8",
    "ClientsList_gr8",
    "ClientsDelete_gr8",
)

CLIENT_KEY_ATTRIBUTE: str = "ci"

CLIENT_DELETED_EVENT: str = "ClientDeleted"


# ---------------------------------------------------------------------------
# Credentials / configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CredentialBundle:
    """AWS credentials resolved from the secret source. Created once per bootstrap."""

    access_key_id: str
    secret_access_key: str = field(repr=False)

    @classmethod
    def from_secret(cls, secret: dict[str, Any]) -> CredentialBundle:
        """Build from the decoded secret blob.

        Raises KeyError if either AWS_ACCESS_KEY_ID or AWS_SECRET_ACCESS_KEY
        is missing or empty.
        """
        access_key_id = str(secret.get("AWS_ACCESS_KEY_ID") or "").strip()
        secret_access_key = str(secret.get("AWS_SECRET_ACCESS_KEY") or "").strip()
        if not access_key_id:
            raise KeyError("AWS_ACCESS_KEY_ID")
        if not secret_access_key:
            raise KeyError("AWS_SECRET_ACCESS_KEY")
        return cls(access_key_id=access_key_id, secret_access_key=secret_access_key)


@dataclass(frozen=True)
class ServiceConfig:
    """Immutable configuration produced by bootstrap and passed to each component."""

    region: str
    credentials: CredentialBundle


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeletionEvent:
    ci: str
    event_type: str = CLIENT_DELETED_EVENT

    def to_dict(self) -> dict[str, Any]:
        return {"eventType": self.event_type, "data": {"ci": self.ci}}


class PublishStatus(StrEnum):
    DELIVERED = "delivered"
    DROPPED = "dropped"


@dataclass(frozen=True)
class PublishOutcome:
    """Result of a best-effort publish. `reason` is set only when dropped."""

    status: PublishStatus
    reason: str | None = None

    @classmethod
    def delivered(cls) -> PublishOutcome:
        return cls(status=PublishStatus.DELIVERED)

    @classmethod
    def dropped(cls, reason: str) -> PublishOutcome:
        return cls(status=PublishStatus.DROPPED, reason=reason)

    @property
    def is_delivered(self) -> bool:
        return self.status is PublishStatus.DELIVERED


# ---------------------------------------------------------------------------
# Delete result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of one delete_client call.

    On success, `publish_outcome` records what happened to the deletion
    event; it never changes `succeeded`. On failure, `table` and `cause`
    identify the first table whose delete failed.
    """

    succeeded: bool
    table: str | None = None
    cause: BaseException | None = None
    publish_outcome: PublishOutcome | None = None

    @classmethod
    def success(cls, publish_outcome: PublishOutcome) -> DeleteResult:
        return cls(succeeded=True, publish_outcome=publish_outcome)

    @classmethod
    def failed(cls, *, table: str, cause: BaseException) -> DeleteResult:
        return cls(succeeded=False, table=table, cause=cause)

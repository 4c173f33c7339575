"""
Change Event Models

The store publishes one ChangeEvent per affected collection after each
mutation has been persisted. Observers (views, exporters, tests) subscribe
to the store and redraw from its snapshots.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from splitledger.models.ledger import utc_now


class LedgerCollection(str, Enum):
    """The two independently persisted collections."""
    TRANSACTIONS = "transactions"
    RECIPIENTS = "recipients"


class ChangeKind(str, Enum):
    """What happened to the collection."""
    LOADED = "loaded"
    SAVED = "saved"
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"
    CASCADED = "cascaded"  # splits unassigned by a recipient delete


class ChangeEvent(BaseModel):
    """A single change notification."""
    model_config = ConfigDict(frozen=True)

    collection: LedgerCollection
    kind: ChangeKind
    entity_ids: tuple[UUID, ...] = Field(
        default=(),
        description="IDs of the entities touched by the change"
    )
    persisted: bool = Field(
        default=True,
        description="False when the persistence write failed"
    )
    occurred_at: datetime = Field(default_factory=utc_now)

    def to_log_dict(self) -> dict:
        return {
            "collection": self.collection.value,
            "kind": self.kind.value,
            "entity_ids": [str(entity_id) for entity_id in self.entity_ids],
            "persisted": self.persisted,
        }

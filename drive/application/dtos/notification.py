"""Notification event DTO: what the dispatcher sends to webhook subscribers."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from drive.application.dtos.bucket import BucketResult
from drive.application.dtos.resource import ResourceResult
from drive.shared.utils.datetime import to_rfc3339


@dataclass(frozen=True)
class NotificationEvent:
    """A resource lifecycle event, captured by value.

    Holds snapshots of the bucket and resource so the event can be delivered
    after the resource row is gone (resource.deleted).
    """

    event_type: str
    occurred_at: datetime
    bucket: BucketResult
    resource: ResourceResult
    resource_url: str

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body posted to subscribers."""
        return {
            "event": self.event_type,
            "timestamp": to_rfc3339(self.occurred_at),
            "bucket_id": self.bucket.id,
            "bucket_name": self.bucket.name,
            "resource_id": self.resource.id,
            "resource_url": self.resource_url,
            "resource": {
                "hash": self.resource.hash,
                "size": self.resource.size,
                "content_type": self.resource.content_type,
                "extension": self.resource.extension,
            },
        }

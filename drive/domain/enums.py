"""Domain enumerations for Drive.

Enums represent fixed sets of domain values (e.g. webhook event kinds).
"""

from enum import Enum


class WebhookEventType(str, Enum):
    """Resource lifecycle event a webhook subscription listens for.

    The value is sent as the payload "event" field and in the
    X-Webhook-Event header.
    """

    RESOURCE_NEW = "resource.new"
    RESOURCE_DELETED = "resource.deleted"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid event type values as strings."""
        return [event.value for event in cls]

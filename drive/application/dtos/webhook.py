"""DTOs for webhook subscriptions and their custom headers."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class WebhookHeaderResult:
    """Custom header attached to a subscription."""

    id: str
    webhook_url_id: str
    header_name: str
    header_value: str
    created_at: datetime


@dataclass(frozen=True)
class WebhookSubscriptionCreate:
    """Input for registering a webhook URL for one event type in a bucket."""

    bucket_id: str
    url: str
    event_type: str
    is_active: bool = True
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class WebhookSubscriptionUpdate:
    """Partial update for a subscription; None leaves the field unchanged."""

    url: str | None = None
    event_type: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class WebhookSubscriptionResult:
    """Subscription read-model with its custom headers (ordered by header name)."""

    id: str
    bucket_id: str
    url: str
    event_type: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    headers: tuple[WebhookHeaderResult, ...] = ()

    def header_map(self) -> dict[str, str]:
        """Return custom headers as name -> value."""
        return {h.header_name: h.header_value for h in self.headers}

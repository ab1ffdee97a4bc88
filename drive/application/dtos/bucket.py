"""DTOs for buckets (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BucketResult:
    """Bucket read-model. Buckets are owned by one client; public buckets also serve unauthenticated downloads."""

    id: str
    name: str
    client_id: str
    is_public: bool
    created_at: datetime
    updated_at: datetime

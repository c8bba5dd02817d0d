"""
Domain model for shared report snapshots.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class SharedReport:
    """
    A persisted, owner-attributed report snapshot readable by link holders.

    Never updated after creation. ``expires_at`` is fixed at creation time;
    readers check it lazily and nothing purges expired rows.
    """

    id: str
    owner_id: str
    owner_name: str
    window_days: Optional[int]
    total_records: int
    created_at: datetime
    expires_at: datetime
    html_content: str
    preview: Dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now: datetime) -> bool:
        """A report stays readable up to and including its expiry instant."""
        return now > self.expires_at

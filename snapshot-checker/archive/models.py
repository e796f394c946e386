from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class ArchiveSnapshot:
    """
    One archived capture of a page, as reported by the Wayback Machine.
    `timestamp` is the 14-digit capture stamp (YYYYMMDDhhmmss).
    """
    original_url: str
    archive_url: str
    timestamp: str
    status: Optional[str] = None
    available: bool = True

    @property
    def captured_at(self) -> Optional[datetime]:
        try:
            return datetime.strptime(self.timestamp[:14], "%Y%m%d%H%M%S")
        except ValueError:
            return None


@dataclass(frozen=True)
class FetchedPage:
    """Raw markup of a page as downloaded. Transient; never persisted."""
    requested_url: str
    resolved_url: str
    html: str
    http_status: int
    content_type: str
    fetch_duration_ms: int
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

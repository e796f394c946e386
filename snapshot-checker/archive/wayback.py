"""
Wayback Machine client.

Looks up archived captures of a page (availability API for the closest
capture, CDX API for a listing) and downloads the archived HTML.
"""

from typing import List, Optional, Union

import requests

from checker.config import (
    USER_AGENT,
    REQUEST_TIMEOUT,
    WAYBACK_AVAILABILITY_URL,
    WAYBACK_CDX_URL,
)
from checker.logger import setup_logger
from archive.models import ArchiveSnapshot
from archive.url_utils import force_https

logger = setup_logger("checker.archive.wayback")


class ArchiveError(Exception):
    """Base class for archive lookup/download failures."""


class ArchiveLookupError(ArchiveError):
    """The availability or CDX API could not be queried."""


class SnapshotFetchError(ArchiveError):
    """An archived capture could not be downloaded."""


class WaybackClient:
    def __init__(self, session: Optional[requests.Session] = None, timeout: int = REQUEST_TIMEOUT):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.timeout = timeout

    def _get_json(self, endpoint: str, params: dict):
        try:
            r = self.session.get(endpoint, params=params, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.exceptions.RequestException as e:
            raise ArchiveLookupError(f"Wayback lookup failed: {e}") from e
        except ValueError as e:
            raise ArchiveLookupError(f"Wayback returned invalid JSON: {e}") from e

    def find_closest(self, url: str, timestamp: Optional[str] = None) -> Optional[ArchiveSnapshot]:
        """
        Closest capture of `url` (to `timestamp` if given, else the latest).
        Returns None when the archive has no usable capture.
        """
        params = {"url": url}
        if timestamp:
            params["timestamp"] = timestamp

        data = self._get_json(WAYBACK_AVAILABILITY_URL, params) or {}
        closest = (data.get("archived_snapshots") or {}).get("closest")
        if not closest or not closest.get("url"):
            logger.info(f"[WAYBACK] No archived snapshot for {url}")
            return None
        if closest.get("available") is False:
            logger.info(f"[WAYBACK] Closest snapshot for {url} is not available")
            return None

        snapshot = ArchiveSnapshot(
            original_url=url,
            archive_url=closest["url"],
            timestamp=str(closest.get("timestamp", "")),
            status=closest.get("status"),
            available=True,
        )
        logger.info(f"[WAYBACK] Closest snapshot: {snapshot.archive_url}")
        return snapshot

    def list_snapshots(
        self,
        url: str,
        limit: int = 50,
        from_ts: Optional[str] = None,
        to_ts: Optional[str] = None,
    ) -> List[ArchiveSnapshot]:
        """
        Successful (HTTP 200) captures of `url`, oldest first.
        A negative limit returns the most recent captures instead.
        """
        params = {
            "url": url,
            "output": "json",
            "fl": "timestamp,original,statuscode",
            "filter": "statuscode:200",
            "collapse": "digest",
            "limit": limit,
        }
        if from_ts:
            params["from"] = from_ts
        if to_ts:
            params["to"] = to_ts

        rows = self._get_json(WAYBACK_CDX_URL, params) or []
        snapshots = []
        # First row is the field header
        for row in rows[1:]:
            if len(row) < 3:
                continue
            ts, original, status = row[0], row[1], row[2]
            snapshots.append(ArchiveSnapshot(
                original_url=original,
                archive_url=f"https://web.archive.org/web/{ts}/{original}",
                timestamp=ts,
                status=status,
            ))

        logger.info(f"[WAYBACK] {len(snapshots)} snapshot(s) listed for {url}")
        return snapshots

    def fetch_snapshot_html(self, snapshot: Union[ArchiveSnapshot, str]) -> str:
        """Download an archived capture. http:// archive URLs are upgraded to https://."""
        archive_url = snapshot.archive_url if isinstance(snapshot, ArchiveSnapshot) else snapshot
        archive_url = force_https(archive_url)

        try:
            r = self.session.get(archive_url, timeout=self.timeout)
            r.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise SnapshotFetchError(f"Failed to fetch archived HTML {archive_url}: {e}") from e

        logger.info(f"[WAYBACK] Archived HTML length: {len(r.text)}")
        return r.text

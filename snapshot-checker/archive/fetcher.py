"""
HTTP fetching of the live page.
Only HTML responses are accepted.
"""

import time

import requests

from checker.config import USER_AGENT, REQUEST_TIMEOUT
from checker.logger import setup_logger
from archive.models import FetchedPage

logger = setup_logger("checker.archive.fetcher")


class PageFetchError(Exception):
    """The live page could not be downloaded as HTML."""


def fetch_page(url, session=None, timeout=REQUEST_TIMEOUT) -> FetchedPage:
    """
    Fetch the current version of a page.
    Raises PageFetchError on network errors, non-2xx status or non-HTML content.
    """
    http = session or requests
    start_time = time.time()

    try:
        r = http.get(
            url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            allow_redirects=True,
        )
    except requests.exceptions.Timeout as e:
        raise PageFetchError(f"Timed out fetching {url}") from e
    except requests.exceptions.ConnectionError as e:
        raise PageFetchError(f"Connection failed for {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        raise PageFetchError(f"Request failed for {url}: {e}") from e

    fetch_time_ms = int((time.time() - start_time) * 1000)
    ct = r.headers.get("Content-Type", "").lower()

    if not 200 <= r.status_code < 300:
        raise PageFetchError(f"HTTP {r.status_code} for {url}")
    if "html" not in ct:
        raise PageFetchError(f"Unexpected content type {ct or 'unknown'!r} for {url}")

    logger.info(f"[FETCH] {url} -> {r.status_code} ({len(r.text)} chars, {fetch_time_ms} ms)")

    return FetchedPage(
        requested_url=url,
        resolved_url=r.url or url,
        html=r.text,
        http_status=r.status_code,
        content_type=ct,
        fetch_duration_ms=fetch_time_ms,
    )

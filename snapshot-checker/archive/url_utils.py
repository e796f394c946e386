import tldextract
from urllib.parse import urlparse

from checker.config import SUPPORTED_DOMAINS

# Bundled public suffix snapshot only; never hits the network
_extract = tldextract.TLDExtract(suffix_list_urls=())


def registered_domain(url: str) -> str:
    """example.co.uk for https://en.example.co.uk/wiki/X"""
    if not url:
        return ""
    ext = _extract(url)
    if not ext.domain or not ext.suffix:
        return ""
    return f"{ext.domain}.{ext.suffix}".lower()


def is_supported_url(url: str, domains=None) -> bool:
    """
    True for http(s) URLs whose registrable domain is in the allowed list.
    """
    if urlparse(url or "").scheme not in ("http", "https"):
        return False
    allowed = SUPPORTED_DOMAINS if domains is None else [d.lower() for d in domains]
    return registered_domain(url) in allowed


def force_https(url: str) -> str:
    """Archived copies are fetched over https only."""
    p = urlparse(url)
    if p.scheme != "http":
        return url
    return p._replace(scheme="https").geturl()

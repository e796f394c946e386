import copy
import re
import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

logger = logging.getLogger("checker.detection.extraction")

# Overlays injected by the Wayback Machine. They only exist in archived copies.
ARCHIVE_OVERLAY_SELECTORS = [
    "#wm-ipp-base",
    "#wm-ipp",
    "#donato",
    ".wb-autocomplete-suggestions",
]

# Primary content container, most specific first
CONTENT_SELECTORS = [
    "#mw-content-text .mw-parser-output",
    "#mw-content-text",
    "#bodyContent",
    "#content",
]

# Elements that change independently of the article text
NOISE_SELECTORS = [
    ".mw-editsection",        # edit buttons
    "#coordinates",
    ".navbox",
    ".navbox-styles",
    ".ambox",                 # article message boxes
    ".mbox-small",
    ".sistersitebox",
    ".hatnote",
    ".dablink",
    ".metadata",
    ".infobox",
    "script",
    "style",
    ".reference",             # footnote markers
    ".mw-references-wrap",
    "#toc",
    ".toc",
    "#siteSub",
    "#contentSub",
    ".printfooter",
    ".catlinks",
    "noscript",
    ".mw-jump-link",
    "#mw-navigation",
    "#footer",
    ".thumbcaption",
    ".magnify",
    "[role='note']",
    ".error",
    ".noprint",
]

# Normalization rules, applied in this order
_CITATION_RE = re.compile(r"\[\d+\]")
_EDIT_MARKER_RE = re.compile(r"\[edit\]")
_CITATION_NEEDED_RE = re.compile(r"\[citation needed\]")
_URL_RE = re.compile(r"https?://[^\s]+")
_DISALLOWED_CHARS_RE = re.compile(r"[^\w\s.,!?;:()'\"-]")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s([.,!?;:])")


def parse_markup(html: str) -> Optional[BeautifulSoup]:
    """
    Parse markup into a queryable tree.
    Returns None when the parser rejects the input outright.
    """
    if not html:
        return None
    try:
        return BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as e:
        logger.warning(f"[EXTRACT] Parser rejected markup: {e}")
        return None


def remove_matching(root: Tag, selectors: Iterable[str]) -> int:
    """Detach every element under root matching any selector. Returns the count."""
    removed = 0
    for selector in selectors:
        for el in root.select(selector):
            el.extract()
            removed += 1
    return removed


def find_content_container(root: Tag, selectors: List[str] = CONTENT_SELECTORS) -> Optional[Tag]:
    for selector in selectors:
        container = root.select_one(selector)
        if container is not None:
            return container
    return None


def normalize_text(text: str) -> str:
    """
    Flattened page text -> NormalizedText.
    Drops citation/edit markers and URLs, keeps basic punctuation only,
    collapses whitespace and lowercases.
    """
    text = _CITATION_RE.sub("", text)
    text = _EDIT_MARKER_RE.sub("", text)
    text = _CITATION_NEEDED_RE.sub("", text)
    text = _URL_RE.sub("", text)
    text = _DISALLOWED_CHARS_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    return text.lower().strip()


def extract_content_v1(html: str) -> str:
    """
    Pinned Version 1 Extraction.
    Returns the normalized article text, or "" when no content container
    is found. An empty result means "could not analyze", never "unchanged".
    """
    soup = parse_markup(html)
    if soup is None:
        return ""
    return extract_from_tree(soup)


def extract_from_tree(soup: BeautifulSoup) -> str:
    """
    Same as extract_content_v1 for an already parsed document.
    Archive overlays are detached from `soup`; the content container is
    copied before noise removal and is left as it was.
    """
    overlays = remove_matching(soup, ARCHIVE_OVERLAY_SELECTORS)
    if overlays:
        logger.debug(f"[EXTRACT] Removed {overlays} archive overlay element(s)")

    container = find_content_container(soup)
    if container is None:
        logger.debug("[EXTRACT] No content container matched")
        return ""

    # Work on a copy so the parsed document stays intact
    content = copy.copy(container)
    remove_matching(content, NOISE_SELECTORS)

    return normalize_text(content.get_text())

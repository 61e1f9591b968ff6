# services/ingestion/record_normalizer.py
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from database.models.paper_normalized import Paper
from services.identity_service import IdentityManager, default_identity_manager
from services.ingestion.vocabulary import (
    CONTRIBUTION_FIELD,
    DEFAULT_SUMMARY,
    DEFAULT_TITLE,
    DEFAULT_YEAR,
    EXPLICIT_LINK_FIELDS,
    SUMMARY_FIELD,
    TAGS_FIELD,
    TITLE_FIELD,
    YEAR_FIELD,
)
from utils.sanitization import has_value, to_text

logger = logging.getLogger(__name__)

# 1. web links with a scheme, 2. arXiv ids, 3. bare GitHub repo paths
LINK_PATTERN = re.compile(r"(https?://[^\s]+)|(arXiv:\d+\.\d+)|(github\.com/[^\s]+)")

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_DOMAIN_HINTS = ("www", ".com", ".org")


def extract_links(text: str) -> List[str]:
    """All link-like fragments in text, in order of appearance."""
    if not text:
        return []
    return [m.group(0) for m in LINK_PATTERN.finditer(text)]


def dedupe_links(links: Iterable[str]) -> List[str]:
    """Exact-match dedupe keeping first occurrence order."""
    return list(dict.fromkeys(links))


def normalize_explicit_link(raw_link: str) -> str:
    """
    Trims an explicit link field. Bare domains get https:// prepended;
    anything else (raw DOIs, arXiv ids) is kept as written.
    """
    link = raw_link.strip()
    if _SCHEME_RE.match(link) or link.startswith("arXiv"):
        return link
    if any(hint in link for hint in _DOMAIN_HINTS):
        return f"https://{link}"
    return link


def find_explicit_link(raw: Dict[str, Any]) -> Optional[str]:
    for field in EXPLICIT_LINK_FIELDS:
        value = raw.get(field)
        if isinstance(value, str) and value.strip():
            return normalize_explicit_link(value)
    return None


def normalize_tags(tags: Any) -> List[str]:
    """
    Keeps list order. Scalars are rendered as text; nulls and nested
    containers are dropped. Anything other than a list yields [].
    """
    if not isinstance(tags, list):
        return []
    return [to_text(tag) for tag in tags if tag is not None and not isinstance(tag, (list, dict))]


def _text_or_default(value: Any, default: str) -> str:
    if not has_value(value) or isinstance(value, (list, dict)):
        return default
    return to_text(value)


def normalize_record(raw: Any, identity: Optional[IdentityManager] = None) -> Paper:
    """
    Maps one raw candidate onto the Paper schema.
    Never fails: every missing or unusable field falls back to its default.
    """
    identity = identity or default_identity_manager
    if not isinstance(raw, dict):
        raw = {}

    summary_raw = raw.get(SUMMARY_FIELD)
    contribution_raw = raw.get(CONTRIBUTION_FIELD)

    summary = _text_or_default(summary_raw, DEFAULT_SUMMARY)
    contribution = _text_or_default(contribution_raw, "")

    # Links: explicit field first, then anything found in the free text
    links = extract_links(f"{_text_or_default(summary_raw, '')} {contribution}")
    explicit = find_explicit_link(raw)
    if explicit:
        links.insert(0, explicit)

    return Paper(
        id=identity.new_id(),
        title=_text_or_default(raw.get(TITLE_FIELD), DEFAULT_TITLE),
        year=_text_or_default(raw.get(YEAR_FIELD), DEFAULT_YEAR),
        tags=normalize_tags(raw.get(TAGS_FIELD)),
        summary=summary,
        contribution=contribution,
        user_notes="",
        is_important=False,
        links=dedupe_links(links),
    )


def normalize_records(candidates: Iterable[Any], identity: Optional[IdentityManager] = None) -> List[Paper]:
    return [normalize_record(candidate, identity) for candidate in candidates]

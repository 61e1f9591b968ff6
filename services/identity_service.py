# services/identity_service.py
import copy
import itertools
import logging
import secrets
import threading
import time
from typing import Any, Dict, List, Optional, Set

from services.ingestion.vocabulary import DEFAULT_SUMMARY, DEFAULT_TITLE, DEFAULT_YEAR
from utils.id_normalization import normalize_record_id

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

# Fallbacks for stored papers missing fields (wire names)
_PAPER_DEFAULTS = {
    "title": DEFAULT_TITLE,
    "year": DEFAULT_YEAR,
    "tags": [],
    "summary": DEFAULT_SUMMARY,
    "contribution": "",
    "userNotes": "",
    "isImportant": False,
    "links": [],
}


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


class IdentityManager:
    """
    Issues record / sheet identifiers and repairs collisions in stored data.

    Identifiers combine wall-clock milliseconds, a per-manager monotonic
    counter and random bits. The counter alone separates calls made within
    the same millisecond; the random part separates processes.
    """

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            sequence = next(self._counter)
        stamp = _to_base36(time.time_ns() // 1_000_000)
        return f"{self.prefix}_{stamp}_{sequence}_{secrets.token_hex(5)}"

    def repair(self, collection: Any) -> List[Dict[str, Any]]:
        """
        Returns a copy of a stored collection (list of sheets) in which every
        paper id is non-empty text and unique across ALL sheets, and every
        paper field that is absent or null holds its import default.

        Walk order is stored order. The first holder of an id keeps it; any
        later holder, and any paper without a usable id, gets a fresh one.
        Entries that are not objects are dropped.
        """
        if not isinstance(collection, list):
            logger.warning(f"Stored collection is {type(collection).__name__}, expected list. Treating as empty.")
            return []

        seen: Set[str] = set()
        replaced = 0
        repaired: List[Dict[str, Any]] = []

        for sheet in collection:
            if not isinstance(sheet, dict):
                logger.warning(f"Dropping non-object sheet entry: {sheet!r}")
                continue

            sheet = copy.deepcopy(sheet)
            papers = sheet.get("papers")
            fixed_papers = []

            for paper in papers if isinstance(papers, list) else []:
                if not isinstance(paper, dict):
                    logger.warning(f"Dropping non-object paper entry in sheet {sheet.get('id')!r}")
                    continue

                current_id: Optional[str] = normalize_record_id(paper.get("id"))
                if current_id is None or current_id in seen:
                    replaced += 1
                    current_id = self.new_id()
                    while current_id in seen:
                        current_id = self.new_id()

                seen.add(current_id)
                paper["id"] = current_id
                for field, default in _PAPER_DEFAULTS.items():
                    if paper.get(field) is None:
                        paper[field] = copy.copy(default)
                fixed_papers.append(paper)

            sheet["papers"] = fixed_papers
            repaired.append(sheet)

        if replaced:
            logger.info(f"Repaired {replaced} missing or duplicate paper id(s) on load")

        return repaired


default_identity_manager = IdentityManager()

# utils/id_normalization.py
from typing import Any, Optional

from utils.sanitization import to_text


def normalize_record_id(raw_id: Any) -> Optional[str]:
    """
    Stored identifiers may be missing, numeric or padded.
    Returns trimmed text, or None when there is nothing usable.
    """
    if raw_id is None or isinstance(raw_id, (bool, dict, list)):
        return None

    clean_id = to_text(raw_id).strip()
    return clean_id or None

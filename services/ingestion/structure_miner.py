# services/ingestion/structure_miner.py
import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List

from services.ingestion.tolerant_parser import TolerantParseError, loads
from services.ingestion.vocabulary import (
    EMBEDDED_OUTPUT_FIELD,
    ENVELOPE_FIELD,
    SUMMARY_FIELD,
    TITLE_FIELD,
)
from utils.sanitization import has_value

logger = logging.getLogger(__name__)

RawRecord = Dict[str, Any]


class NodeKind(str, Enum):
    ENVELOPE = "ENVELOPE"                # {"data": [...]}
    EMBEDDED_OUTPUT = "EMBEDDED_OUTPUT"  # {"output": "<serialized array>"}
    CANDIDATE = "CANDIDATE"              # carries a title or summary itself


def classify(node: Dict[str, Any]) -> FrozenSet[NodeKind]:
    """
    Classifies one object node. Kinds are not exclusive; an empty set means
    a plain object with nothing to extract.
    """
    kinds = set()
    if isinstance(node.get(ENVELOPE_FIELD), list):
        kinds.add(NodeKind.ENVELOPE)
    if isinstance(node.get(EMBEDDED_OUTPUT_FIELD), str):
        kinds.add(NodeKind.EMBEDDED_OUTPUT)
    if has_value(node.get(TITLE_FIELD)) or has_value(node.get(SUMMARY_FIELD)):
        kinds.add(NodeKind.CANDIDATE)
    return frozenset(kinds)


def _decode_embedded_output(serialized: str) -> List[RawRecord]:
    try:
        decoded = loads(serialized, fallback_log_level=logging.DEBUG)
    except TolerantParseError as e:
        logger.debug(f"Skipping undecodable '{EMBEDDED_OUTPUT_FIELD}' string: {e}")
        return []

    if not isinstance(decoded, list):
        logger.debug(f"Embedded '{EMBEDDED_OUTPUT_FIELD}' decoded to {type(decoded).__name__}, not a list. Skipping.")
        return []

    records = [item for item in decoded if isinstance(item, dict)]
    skipped = len(decoded) - len(records)
    if skipped:
        logger.debug(f"Ignored {skipped} non-object entries in embedded '{EMBEDDED_OUTPUT_FIELD}'")
    return records


def mine_candidates(tree: Any) -> List[RawRecord]:
    """
    Depth-first walk of a decoded value tree collecting candidate raw records
    in input order. The same object may be emitted more than once when it is
    both a wrapper and a candidate.
    """
    found: List[RawRecord] = []
    _walk(tree, found)
    return found


def _walk(node: Any, found: List[RawRecord]) -> None:
    if isinstance(node, list):
        for item in node:
            _walk(item, found)
        return

    if not isinstance(node, dict):
        return

    kinds = classify(node)

    if NodeKind.ENVELOPE in kinds:
        for item in node[ENVELOPE_FIELD]:
            _walk(item, found)

    if NodeKind.EMBEDDED_OUTPUT in kinds:
        found.extend(_decode_embedded_output(node[EMBEDDED_OUTPUT_FIELD]))

    if NodeKind.CANDIDATE in kinds:
        found.append(node)

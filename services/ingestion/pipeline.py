# services/ingestion/pipeline.py
import logging
from typing import List, Optional

from database.models.paper_normalized import Paper
from services.identity_service import IdentityManager
from services.ingestion.record_normalizer import normalize_records
from services.ingestion.structure_miner import mine_candidates
from services.ingestion.tolerant_parser import TolerantParseError, loads

logger = logging.getLogger(__name__)


def parse_raw_json(text: str, identity: Optional[IdentityManager] = None) -> List[Paper]:
    """
    Main entry point for pasted exports.
    1. Deserialize (strict, then tolerant grammar)
    2. Mine candidate records out of whatever nesting the export used
    3. Normalize each candidate to a Paper with a fresh id

    Never raises. Unreadable input yields [] and an error in the log.
    """
    try:
        tree = loads(text)
    except TolerantParseError as e:
        logger.error(f"All parsing attempts failed: {e}")
        return []

    try:
        candidates = mine_candidates(tree)
    except RecursionError:
        logger.error("Input nested too deeply to traverse", exc_info=True)
        return []

    papers = normalize_records(candidates, identity)
    logger.info(f"Parsed {len(papers)} paper(s) from {len(text)} characters of input")
    return papers

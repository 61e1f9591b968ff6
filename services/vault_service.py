# File: services/vault_service.py
"""
Persistence and editing of the paper vault.

The whole collection (list of sheets) is stored as a single JSON document,
so every write is a read-modify-write of that document. Concurrent writers
resolve as last-write-wins.
"""
import copy
import logging
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from database.db import SessionLocal
from database.models.paper_normalized import Sheet
from database.models.vault_model import VaultDocument
from services.identity_service import IdentityManager, default_identity_manager
from services.ingestion.pipeline import parse_raw_json
from utils.sanitization import to_text

logger = logging.getLogger(__name__)

DEFAULT_VAULT_KEY = "default"


class VaultNotFoundError(LookupError):
    pass


class EmptyImportError(ValueError):
    pass


def _get_db() -> Session:
    return SessionLocal()


def _read_sheets(vault_key: str) -> List[Any]:
    db = _get_db()
    try:
        row = (
            db.query(VaultDocument)
            .filter(VaultDocument.vault_key == vault_key)
            .first()
        )
        if not row or row.sheets is None:
            return []

        # Deep copy so callers never mutate ORM-held state
        return copy.deepcopy(row.sheets)

    finally:
        db.close()


def save_collection(sheets: List[Dict[str, Any]], vault_key: str = DEFAULT_VAULT_KEY) -> None:
    """Overwrites the stored collection."""
    db = _get_db()
    try:
        row = (
            db.query(VaultDocument)
            .filter(VaultDocument.vault_key == vault_key)
            .first()
        )
        if row:
            row.sheets = copy.deepcopy(sheets)
        else:
            db.add(VaultDocument(vault_key=vault_key, sheets=copy.deepcopy(sheets)))
        db.commit()

    except Exception:
        db.rollback()
        logger.exception("Failed to persist vault collection.")
        raise

    finally:
        db.close()


def load_collection(
    vault_key: str = DEFAULT_VAULT_KEY,
    identity: Optional[IdentityManager] = None
) -> List[Dict[str, Any]]:
    """
    Loads the stored collection and repairs paper ids.
    If the repair changed anything it is written back, so the ids handed to
    the caller stay valid for later updates and deletes.
    """
    identity = identity or default_identity_manager
    stored = _read_sheets(vault_key)
    repaired = identity.repair(stored)

    if repaired != stored:
        save_collection(repaired, vault_key)

    return repaired


def get_sheet(sheet_id: str, vault_key: str = DEFAULT_VAULT_KEY) -> Dict[str, Any]:
    for sheet in load_collection(vault_key):
        if to_text(sheet.get("id")) == sheet_id:
            return sheet
    raise VaultNotFoundError(f"Sheet {sheet_id} not found")


def import_sheet(
    title: str,
    raw_text: str,
    vault_key: str = DEFAULT_VAULT_KEY,
    identity: Optional[IdentityManager] = None
) -> Dict[str, Any]:
    """
    Parses pasted text into a new sheet appended to the end of the vault.
    Raises EmptyImportError (and stores nothing) when no papers were found.
    """
    identity = identity or default_identity_manager
    papers = parse_raw_json(raw_text, identity)
    if not papers:
        raise EmptyImportError("Could not find any valid paper data in the input. Please check the format.")

    sheet = Sheet(
        id=identity.new_id(),
        title=title.strip(),
        created_at=int(time.time() * 1000),
        papers=papers,
    ).model_dump(by_alias=True)

    sheets = load_collection(vault_key, identity)
    sheets.append(sheet)
    save_collection(sheets, vault_key)

    logger.info(f"Imported sheet '{sheet['title']}' with {len(papers)} paper(s)")
    return sheet


def update_paper(
    paper_id: str,
    user_notes: Optional[str] = None,
    is_important: Optional[bool] = None,
    vault_key: str = DEFAULT_VAULT_KEY
) -> Dict[str, Any]:
    """Updates the user-owned fields of one paper. None leaves a field untouched."""
    sheets = load_collection(vault_key)
    for sheet in sheets:
        for paper in sheet["papers"]:
            if paper["id"] != paper_id:
                continue
            if user_notes is not None:
                paper["userNotes"] = user_notes
            if is_important is not None:
                paper["isImportant"] = is_important
            save_collection(sheets, vault_key)
            return paper

    raise VaultNotFoundError(f"Paper {paper_id} not found")


def delete_paper(paper_id: str, vault_key: str = DEFAULT_VAULT_KEY) -> None:
    sheets = load_collection(vault_key)
    removed = 0
    for sheet in sheets:
        kept = [p for p in sheet["papers"] if p["id"] != paper_id]
        removed += len(sheet["papers"]) - len(kept)
        sheet["papers"] = kept

    if not removed:
        raise VaultNotFoundError(f"Paper {paper_id} not found")

    save_collection(sheets, vault_key)


def delete_sheet(sheet_id: str, vault_key: str = DEFAULT_VAULT_KEY) -> None:
    sheets = load_collection(vault_key)
    kept = [s for s in sheets if to_text(s.get("id")) != sheet_id]
    if len(kept) == len(sheets):
        raise VaultNotFoundError(f"Sheet {sheet_id} not found")

    save_collection(kept, vault_key)


def search_papers(papers: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on title, summary and tags."""
    q = (query or "").lower()
    if not q:
        return list(papers)

    def matches(paper: Dict[str, Any]) -> bool:
        if q in to_text(paper.get("title")).lower():
            return True
        if q in to_text(paper.get("summary")).lower():
            return True
        tags = paper.get("tags")
        return isinstance(tags, list) and any(q in to_text(t).lower() for t in tags)

    return [p for p in papers if matches(p)]

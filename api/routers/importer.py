# File: api/routers/importer.py
from fastapi import APIRouter, HTTPException
import logging
import os

from api.models.vault_models import ImportPreviewRequest, ImportPreviewResponse, ImportRequest
from services import vault_service
from services.ingestion.pipeline import parse_raw_json
from services.vault_service import EmptyImportError

router = APIRouter()
logger = logging.getLogger(__name__)

# 50M characters unless overridden
MAX_IMPORT_CHARS = int(os.getenv("MAX_IMPORT_CHARS", str(50 * 1024 * 1024)))


def _check_raw_text(raw_text: str) -> None:
    if not raw_text.strip():
        raise HTTPException(status_code=400, detail="Please paste some JSON data first.")
    if len(raw_text) > MAX_IMPORT_CHARS:
        raise HTTPException(status_code=413, detail=f"Import too large (limit {MAX_IMPORT_CHARS} characters)")


@router.post("/preview", response_model=ImportPreviewResponse)
def preview_import(payload: ImportPreviewRequest) -> ImportPreviewResponse:
    """
    Runs the parser without storing anything, so the pasted text can be
    checked before it becomes a sheet.
    """
    _check_raw_text(payload.raw_text)
    try:
        papers = parse_raw_json(payload.raw_text)
    except Exception:
        logger.error("Error previewing import", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error during preview")
    return ImportPreviewResponse(
        count=len(papers),
        papers=[p.model_dump(by_alias=True) for p in papers]
    )


@router.post("", response_model=dict)
def create_import(payload: ImportRequest) -> dict:
    _check_raw_text(payload.raw_text)
    if not payload.title.strip():
        raise HTTPException(status_code=400, detail="Please give this collection a name.")

    try:
        return vault_service.import_sheet(payload.title, payload.raw_text)
    except EmptyImportError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception:
        logger.error("Error importing sheet", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error during import")

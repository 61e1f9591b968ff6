# File: api/routers/vault.py
from datetime import datetime, timezone
from typing import Any, Dict, List
from urllib.parse import quote
import logging
import re

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import JSONResponse

from api.models.vault_models import PaperUpdateRequest, SaveResponse
from services import vault_service
from services.analytics_service import sheet_analytics
from services.vault_service import VaultNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


def _attachment(content: Any, filename: str) -> JSONResponse:
    return JSONResponse(
        content=content,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
    )


@router.get("/data", response_model=List[Dict[str, Any]])
def get_data() -> List[Dict[str, Any]]:
    try:
        return vault_service.load_collection()
    except Exception:
        logger.error("Error reading vault", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to read database")


@router.post("/data", response_model=SaveResponse)
def save_data(sheets: List[Dict[str, Any]] = Body(...)) -> SaveResponse:
    try:
        vault_service.save_collection(sheets)
    except Exception:
        logger.error("Error writing vault", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save data")

    return SaveResponse(success=True, timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/backup")
def download_backup():
    try:
        sheets = vault_service.load_collection()
    except Exception:
        logger.error("Error reading vault for backup", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to read database")

    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    return _attachment(sheets, f"researchvault-backup-{stamp}.json")


@router.get("/sheets/{sheet_id}/papers", response_model=List[Dict[str, Any]])
def list_sheet_papers(sheet_id: str, q: str = Query(default="")) -> List[Dict[str, Any]]:
    try:
        sheet = vault_service.get_sheet(sheet_id)
    except VaultNotFoundError:
        raise HTTPException(status_code=404, detail="Sheet not found")
    return vault_service.search_papers(sheet["papers"], q)


@router.get("/sheets/{sheet_id}/analytics", response_model=dict)
def get_sheet_analytics(sheet_id: str) -> dict:
    try:
        sheet = vault_service.get_sheet(sheet_id)
    except VaultNotFoundError:
        raise HTTPException(status_code=404, detail="Sheet not found")
    return sheet_analytics(sheet)


@router.get("/sheets/{sheet_id}/export")
def export_sheet(sheet_id: str):
    try:
        sheet = vault_service.get_sheet(sheet_id)
    except VaultNotFoundError:
        raise HTTPException(status_code=404, detail="Sheet not found")

    name = re.sub(r"\s+", "_", str(sheet.get("title") or "sheet"))
    return _attachment(sheet, f"{name}.json")


@router.delete("/sheets/{sheet_id}", response_model=dict)
def remove_sheet(sheet_id: str) -> dict:
    try:
        vault_service.delete_sheet(sheet_id)
    except VaultNotFoundError:
        raise HTTPException(status_code=404, detail="Sheet not found")
    return {"success": True}


@router.patch("/papers/{paper_id}", response_model=Dict[str, Any])
def patch_paper(paper_id: str, payload: PaperUpdateRequest) -> Dict[str, Any]:
    try:
        return vault_service.update_paper(
            paper_id,
            user_notes=payload.user_notes,
            is_important=payload.is_important
        )
    except VaultNotFoundError:
        raise HTTPException(status_code=404, detail="Paper not found")


@router.delete("/papers/{paper_id}", response_model=dict)
def remove_paper(paper_id: str) -> dict:
    try:
        vault_service.delete_paper(paper_id)
    except VaultNotFoundError:
        raise HTTPException(status_code=404, detail="Paper not found")
    return {"success": True}

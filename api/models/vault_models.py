# File: api/models/vault_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class ImportPreviewRequest(BaseModel):
    raw_text: str


class ImportRequest(BaseModel):
    title: str
    raw_text: str


class ImportPreviewResponse(BaseModel):
    count: int
    papers: List[Dict[str, Any]]


class PaperUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_notes: Optional[str] = Field(default=None, alias="userNotes")
    is_important: Optional[bool] = Field(default=None, alias="isImportant")


class SaveResponse(BaseModel):
    success: bool
    timestamp: str

# models/paper_normalized.py
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class Paper(BaseModel):
    """
    Canonical, schema-complete paper record.
    Serialized with camelCase aliases (userNotes, isImportant), which is the
    stored / wire form.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    year: str
    tags: List[str] = Field(default_factory=list)   # insertion order kept
    summary: str
    contribution: str = ""

    # User-owned fields, blank at import
    user_notes: str = Field(default="", alias="userNotes")
    is_important: bool = Field(default=False, alias="isImportant")

    links: List[str] = Field(default_factory=list)  # primary link first, no duplicates


class Sheet(BaseModel):
    """One named group of papers inside the vault."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    created_at: int = Field(alias="createdAt")      # epoch milliseconds
    papers: List[Paper] = Field(default_factory=list)

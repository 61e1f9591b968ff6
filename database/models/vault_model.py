# File: database/models/vault_model.py
from sqlalchemy import Column, Integer, String, JSON, DateTime, func
from database.db import Base


class VaultDocument(Base):
    __tablename__ = "vault_documents"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # One document per vault; the app uses a single "default" vault
    vault_key = Column(String(255), unique=True, nullable=False, index=True)

    # Full collection in wire form: [{id, title, createdAt, papers: [...]}, ...]
    sheets = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

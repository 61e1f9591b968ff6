# File: database/db.py
import os
from typing import Any, Dict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base


DATA_DIR = os.getenv("DATA_DIR", "./data")


def _default_database_url() -> str:
    # Local single-user setup: one SQLite file under DATA_DIR
    os.makedirs(DATA_DIR, exist_ok=True)
    return f"sqlite:///{os.path.join(DATA_DIR, 'researchvault.db')}"


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        # Request handlers run in a threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_pre_ping": True,
        "connect_args": {"connect_timeout": 10},
    }


DATABASE_URL = os.getenv("DATABASE_URL") or _default_database_url()

engine = create_engine(DATABASE_URL, echo=False, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    from database.models.vault_model import VaultDocument  # noqa: F401 (registers the table)
    Base.metadata.create_all(bind=engine)

# File: tests/conftest.py
import os
import tempfile

# Must be set before anything imports database.db
_TMP_DIR = tempfile.mkdtemp(prefix="researchvault-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ.setdefault("APP_ENV", "test")

import pytest
from database.db import SessionLocal, init_db
from database.models.vault_model import VaultDocument

init_db()


@pytest.fixture(autouse=True)
def clean_vault():
    db = SessionLocal()
    try:
        db.query(VaultDocument).delete()
        db.commit()
    finally:
        db.close()
    yield

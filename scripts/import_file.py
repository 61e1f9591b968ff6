# scripts/import_file.py
import sys
import os
import logging

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from dotenv import load_dotenv
load_dotenv(".env.local")

from database.db import init_db
from services.ingestion.pipeline import parse_raw_json
from services.vault_service import EmptyImportError, import_sheet

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_import(path: str, title: str, dry_run: bool = False) -> int:
    with open(path, "r", encoding="utf-8") as f:
        raw_text = f.read()

    if dry_run:
        papers = parse_raw_json(raw_text)
        print(f"🔍 Found {len(papers)} paper(s) in {path}")
        for p in papers[:5]:
            print(f"  - [{p.year}] {p.title}")
        return len(papers)

    init_db()
    try:
        sheet = import_sheet(title, raw_text)
    except EmptyImportError as e:
        print(f"❌ {e}")
        return 0

    print(f"✅ Stored sheet '{sheet['title']}' ({sheet['id']}) with {len(sheet['papers'])} paper(s)")
    return len(sheet["papers"])


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Import a pasted export file into the vault")
    parser.add_argument("--file", type=str, help="Path to the export file", required=True)
    parser.add_argument("--title", type=str, help="Name of the new sheet", default="Imported Papers")
    parser.add_argument("--dry-run", action="store_true", help="Parse and report only, store nothing")
    args = parser.parse_args()

    count = run_import(args.file, args.title, args.dry_run)
    sys.exit(0 if count else 1)

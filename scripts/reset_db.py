# scripts/reset_db.py
import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from dotenv import load_dotenv
load_dotenv(".env.local")

from database.db import DATABASE_URL, SessionLocal, init_db
from database.models.vault_model import VaultDocument


def reset_vault(assume_yes: bool = False) -> int:
    """
    Removes every stored vault document. The table itself is kept.
    Returns the number of documents removed.
    """
    print(f"⚠️  This deletes ALL sheets and papers stored in {DATABASE_URL.split('@')[-1]}")
    if not assume_yes:
        answer = input("Type 'yes' to continue: ")
        if answer.strip().lower() != "yes":
            print("Cancelled.")
            return 0

    init_db()
    db = SessionLocal()
    try:
        removed = db.query(VaultDocument).delete()
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"❌ Reset failed: {e}")
        raise
    finally:
        db.close()

    print(f"✅ Removed {removed} vault document(s).")
    return removed


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Wipe the stored vault")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()
    reset_vault(args.yes)

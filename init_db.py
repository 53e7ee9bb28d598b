"""
Run this script once to create the save table (local SQLite file, or Postgres
when DATABASE_URL / DB_* are set) and print the stored progress.
Usage: python init_db.py [--reset]
"""
import sys
from settings import Settings, ensure_directories
from progress import create_progress_store
from async_helper import stop_async_loop

def main(argv: list[str]) -> int:
    ensure_directories()
    cfg = Settings()
    store = create_progress_store(cfg)
    try:
        if "--reset" in argv:
            if not store.reset():
                return 1
            print("🔄 Resumable run cleared (high scores kept)")
        record = store.load()
        print("✅ Save storage ready")
        print(f"📊 Progress: {record}")
    finally:
        store.close()
        stop_async_loop()
    return 0

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

#!/usr/bin/env python3
"""
Demo seed:
- Creates tables if missing.
- Inserts demo accounts and credentials (expiration dates relative to today).
- Safe to run multiple times (idempotent).
"""
import os
import sys

# enable 'app.' imports
sys.path.append(os.getcwd())

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

from app.db.base import Base  # noqa: E402
from app.db.seed import seed_demo_records  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.models import account, credential  # noqa: E402,F401


def main() -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed_demo_records(db)
    finally:
        db.close()
    print(f"Seeded {created} records.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

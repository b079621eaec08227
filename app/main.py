# app/main.py
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# ---------------------------
# Env loading (root .env first, then app/.env as fallback)
# ---------------------------
load_dotenv(find_dotenv(usecwd=True))
load_dotenv(Path(__file__).resolve().parent / ".env", override=False)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("app.main")

from fastapi import FastAPI  # noqa: E402

from app.api import health  # noqa: E402
from app.api.v1 import accounts, credentials, dashboard  # noqa: E402
from app.core.errors import register_exception_handlers  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.middleware.request_logging import RequestLoggingMiddleware  # noqa: E402
from app.models import account, credential  # noqa: E402,F401  (registers tables on Base)

# ---------------------------
# CREATE TABLES (dev-only; guard with env)
# ---------------------------
ENABLE_CREATE_ALL = os.getenv("ENABLE_CREATE_ALL", "1") == "1"
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "0") == "1"

if ENABLE_CREATE_ALL:
    Base.metadata.create_all(bind=engine)

# ---------------------------
# APP
# ---------------------------
app = FastAPI(title="Credential Compliance", version="1.0.0")

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

# ---------------------------
# ROUTER MOUNT
# ---------------------------
app.include_router(credentials.router, prefix="/api/v1", tags=["credentials"])
app.include_router(accounts.router, prefix="/api/v1", tags=["accounts"])
app.include_router(dashboard.router, prefix="/api/v1", tags=["dashboard"])
app.include_router(health.router, prefix="/api", tags=["health"])


@app.on_event("startup")
def _seed_demo_data():
    # Enable with SEED_DEMO_DATA=1; only fills an empty database
    if not SEED_DEMO_DATA:
        return
    from app.db.seed import seed_demo_records

    db = SessionLocal()
    try:
        created = seed_demo_records(db)
        log.info("demo seed: %s records created", created)
    finally:
        db.close()

# bank_sync/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bank_sync.config import ALLOWED_ORIGINS, PROVIDER_BASE_URL, PROVIDER_SECRET_ID
from bank_sync.logging_config import setup_logging
from bank_sync.middleware import RequestIDMiddleware
from bank_sync.routes.accounts import router as accounts_router
from bank_sync.routes.health import router as health_router
from bank_sync.routes.metrics import router as metrics_router
from bank_sync.routes.sync import router as sync_router

setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Bank Sync API",
    description="API for managing linked bank accounts and synchronizing them with the bank data provider",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(accounts_router, prefix="/api", tags=["Accounts"])
app.include_router(sync_router, prefix="/api", tags=["Sync"])


@app.on_event("startup")
def startup_event() -> None:
    """Log provider configuration on startup."""
    if not PROVIDER_SECRET_ID:
        logger.warning("provider_credentials_missing", provider=PROVIDER_BASE_URL)
    logger.info("application_started", provider=PROVIDER_BASE_URL)

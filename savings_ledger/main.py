"""
Savings Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from savings_ledger.config import get_settings
from savings_ledger.logging_config import setup_logging
from savings_ledger.api.deps import get_password_hasher, get_token_service
from savings_ledger.api.health import router as health_router
from savings_ledger.api.auth import router as auth_router
from savings_ledger.api.account import router as account_router
from savings_ledger.api.admin import router as admin_router

settings = get_settings()
logger = setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Build the hasher and token signer up front so a missing
    # secret stops the process before it serves any request.
    get_password_hasher()
    get_token_service()
    logger.info("%s %s started (%s)", settings.APP_NAME,
                settings.APP_VERSION, settings.ENVIRONMENT)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Savings accounts with a device-gated ledger",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(account_router)
app.include_router(admin_router)


def run() -> None:
    """Serve the application with uvicorn using HOST and PORT."""
    uvicorn.run(
        "savings_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()

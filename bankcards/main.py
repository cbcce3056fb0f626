"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Lifespan manager — logging setup, table creation, admin bootstrap, cleanup
  2. CORS middleware — allows frontend origins to make cross-origin requests
  3. Exception handlers — maps domain errors to HTTP responses
  4. Router registration — mounts all API endpoint groups under API_PREFIX

Running locally:
    uvicorn bankcards.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bankcards.config import settings
from bankcards.database import AsyncSessionLocal, Base, engine
from bankcards.exceptions import register_exception_handlers
from bankcards.logging_config import configure_logging, get_logger
from bankcards.repositories import UserRepository
from bankcards.routers import auth, cards, transfers, users
from bankcards.services import auth_service

logger = get_logger(__name__)


async def bootstrap_admin() -> None:
    """Create the configured ADMIN account if it does not exist yet."""
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return

    async with AsyncSessionLocal() as session:
        admin = await auth_service.ensure_admin(
            UserRepository(session),
            username=settings.ADMIN_USERNAME,
            password=settings.ADMIN_PASSWORD,
        )
        await session.commit()

    if admin is not None:
        logger.info("admin_bootstrapped", username=admin.username)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Configures structured logging, creates all database tables if they
      don't exist, and creates the bootstrap admin when one is configured.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    configure_logging(log_level=settings.LOG_LEVEL, format_as_json=settings.LOG_JSON)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await bootstrap_admin()
    logger.info("application_started", version=settings.APP_VERSION)
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Bank card management REST API with users, cards and card-to-card transfers",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["Users"])
app.include_router(cards.router, prefix=f"{settings.API_PREFIX}/cards", tags=["Cards"])
app.include_router(transfers.router, prefix=f"{settings.API_PREFIX}/transfers", tags=["Transfers"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for deployment probes."""
    return {"status": "ok", "version": settings.APP_VERSION}

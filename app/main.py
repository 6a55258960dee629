# app/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import sys

from app.core.database import test_connection, init_db, AsyncSessionLocal
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.rate_limiter import limiter
from app.models.enums import AdminRole
from app.services.audit_service import register_audit_hooks
from app.services.auth_service import get_user_by_username, create_user
from app.services.settings_service import seed_default_settings
from app.services.template_service import seed_default_email_templates

# Routers
from app.api.endpoints import (
    analytics as analytics_router,
    applications as applications_router,
    audit as audit_router,
    auth as auth_router,
    comments as comments_router,
    intake as intake_router,
    notifications as notifications_router,
    settings as settings_router,
    templates as templates_router,
    users as users_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title=f"{settings.COMMUNITY_NAME} Applications Backend",
    version="1.0.0",
    description="Staff application intake and review portal.",
)

register_exception_handlers(app)

# Public intake and login are rate limited per client IP
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Audit rows are written by the ORM flush hook for every tracked table
register_audit_hooks()

# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "*"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(intake_router.router)
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(applications_router.router)
app.include_router(comments_router.router)
app.include_router(audit_router.router)
app.include_router(notifications_router.router)
app.include_router(analytics_router.router)
app.include_router(settings_router.router)
app.include_router(templates_router.router)


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("🚀 Starting applications backend...")

    # 1) Database connection test
    try:
        await test_connection()
        logger.success("Database connection established.")
    except Exception:
        logger.exception("Startup aborted: Database connection failed.")
        return

    # 2) Initialize database tables
    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    # 3) Seed Super Admin
    try:
        async with AsyncSessionLocal() as session:
            if not settings.SUPER_ADMIN_USERNAME or not settings.SUPER_ADMIN_PASSWORD:
                logger.warning("Missing Super Admin credentials in settings.")
            elif await get_user_by_username(session, settings.SUPER_ADMIN_USERNAME):
                logger.info("Super Admin already exists. Skipping.")
            else:
                logger.info(f"Seeding Super Admin: {settings.SUPER_ADMIN_USERNAME}")
                await create_user(
                    session=session,
                    username=settings.SUPER_ADMIN_USERNAME,
                    password=settings.SUPER_ADMIN_PASSWORD,
                    role=AdminRole.SuperAdmin,
                )
                logger.success("Super Admin created successfully.")
    except Exception:
        logger.exception("Super Admin seeding failed.")

    # 4) Default settings and email templates
    try:
        async with AsyncSessionLocal() as session:
            await seed_default_settings(session)
            await seed_default_email_templates(session)
    except Exception:
        logger.exception("Default data seeding failed.")

    logger.success("Backend startup completed successfully.\n")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": f"{settings.COMMUNITY_NAME} Applications Backend",
        "version": app.version,
        "message": "Backend running successfully 🚀",
    }

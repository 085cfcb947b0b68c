"""
FastAPI app entry point
"""
import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from .auth_utils import get_password_hash, verify_password
from .config import settings
from .db import Base, SessionLocal, engine
from .models import User, UserRole, UserStatus
from .routes import admin, auth, bookings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_alembic_migrations(max_retries: int = 5, retry_delay: int = 5) -> bool:
    """
    Run Alembic migrations programmatically with retry logic
    """
    from alembic import command
    from alembic.config import Config

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    alembic_ini_path = os.path.join(base_dir, "alembic.ini")

    if not os.path.exists(alembic_ini_path):
        logger.warning("alembic.ini not found, skipping migrations")
        return False

    logger.info("Running Alembic migrations...")
    alembic_cfg = Config(alembic_ini_path)

    for attempt in range(max_retries):
        try:
            command.upgrade(alembic_cfg, "head")
            logger.info("Migrations completed successfully")
            return True
        except OperationalError:
            if attempt < max_retries - 1:
                logger.warning(
                    f"Database connection failed (attempt {attempt + 1}/{max_retries}), "
                    f"retrying in {retry_delay} seconds...")
                time.sleep(retry_delay)
            else:
                logger.error(f"Database connection failed after {max_retries} attempts")
                raise
    return False


def ensure_admin_exists(db: Session) -> User:
    """
    Create the default admin, or bring an existing account with the same
    email back to admin/approved with the configured password.
    """
    email = settings.DEFAULT_ADMIN_EMAIL.strip().lower()
    admin_user = db.query(User).filter(User.email == email).first()

    if admin_user is None:
        logger.info(f"Creating default admin: {email}")
        admin_user = User(
            name=settings.DEFAULT_ADMIN_NAME,
            email=email,
            password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.admin,
            status=UserStatus.approved,
        )
        db.add(admin_user)
    else:
        admin_user.role = UserRole.admin
        admin_user.status = UserStatus.approved
        if not verify_password(settings.DEFAULT_ADMIN_PASSWORD, admin_user.password_hash):
            admin_user.password_hash = get_password_hash(settings.DEFAULT_ADMIN_PASSWORD)
            logger.info("Default admin password updated")

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(admin_user)
    logger.info(f"Default admin ready: {email}")
    return admin_user


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME} in {settings.ENVIRONMENT} mode...")
    logger.info("=" * 60)

    if settings.RUN_MIGRATIONS:
        run_alembic_migrations()
    elif not settings.is_production:
        # Development convenience; production schemas come from Alembic
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    db = SessionLocal()
    try:
        ensure_admin_exists(db)
    finally:
        db.close()

    logger.info("Application ready!")

    yield

    # Shutdown
    logger.info("Shutting down...")
    engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {
        "status": "ok",
        "message": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": f"{settings.APP_NAME} is running",
        "environment": settings.ENVIRONMENT,
        "smtp_enabled": settings.smtp_enabled,
    }


# Register routers
app.include_router(auth.router)
app.include_router(bookings.router)
app.include_router(admin.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("seminar_hall.main:app", host=settings.HOST, port=settings.PORT, reload=False)

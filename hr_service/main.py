"""
HR Records Service - Main Application Entry Point.

This service handles HR record keeping including:
- Operator login with signed bearer tokens
- Employee profiles with photo upload and soft-delete
- Daily attendance check-ins (one per employee per day)
- Monthly attendance reports
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hr_service.api.routes.attendance import router as attendance_router
from hr_service.api.routes.auth import router as auth_router
from hr_service.api.routes.employees import router as employees_router
from hr_service.api.routes.health import router as health_router
from hr_service.api.routes.reports import router as reports_router
from hr_service.core.attendance_service import AttendanceService
from hr_service.core.auth_service import AuthService
from hr_service.core.config import Settings, settings
from hr_service.core.database import create_db_and_tables, create_db_engine
from hr_service.core.employee_service import EmployeeService
from hr_service.core.exceptions import register_exception_handlers
from hr_service.core.logging import get_logger, setup_logging
from hr_service.core.storage import LocalPhotoStorage, build_photo_storage

logger = get_logger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The database engine, photo storage and services are constructed once
    here and shared by every request through ``app.state``.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.LOG_LEVEL)

    engine = create_db_engine(app_settings)
    photo_storage = build_photo_storage(app_settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        """
        Application lifespan manager.
        Handles startup and shutdown events.
        """
        # Startup
        logger.info(f"Starting {app_settings.APP_NAME}...")

        logger.info("Creating database and tables...")
        create_db_and_tables(engine)
        logger.info("Database and tables created successfully")

        photo_storage.prepare()
        logger.info(f"{app_settings.APP_NAME} startup complete")

        yield

        # Shutdown
        logger.info(f"{app_settings.APP_NAME} shutting down...")
        engine.dispose()
        logger.info(f"{app_settings.APP_NAME} shutdown complete")

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="HR record keeping: employees, daily check-ins and monthly attendance reports",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = app_settings
    app.state.engine = engine
    app.state.photo_storage = photo_storage
    app.state.auth_service = AuthService(engine, app_settings)
    app.state.employee_service = EmployeeService(engine)
    app.state.attendance_service = AttendanceService(engine)

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=app_settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=app_settings.CORS_ALLOW_METHODS,
        allow_headers=app_settings.CORS_ALLOW_HEADERS,
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(employees_router)
    app.include_router(attendance_router)
    app.include_router(reports_router)

    # Locally stored photos are served read-only
    if isinstance(photo_storage, LocalPhotoStorage):
        app.mount(
            photo_storage.url_prefix,
            StaticFiles(directory=photo_storage.upload_dir, check_dir=False),
            name="uploads",
        )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    uvicorn.run(
        "hr_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()

"""
Campus Placement Portal - Main Application

FastAPI backend with:
- SQL (PostgreSQL) for users, students, companies, drives and applications
- MongoDB for notifications, calendar events and resume scores
- JWT authentication (admin / student roles)
- Resume uploads served from /uploads

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import PortalError, portal_error_handler
from app.core.logging_config import configure_logging
from app.db.postgres import init_db, test_postgres_connection
from app.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Campus Placement Portal",
    description="""
    Placement drives, applications and hiring rounds for a campus.

    ## Features
    - **Authentication**: JWT-based auth for admins and students
    - **Companies & Drives**: Drive eligibility, rounds and calendar events
    - **Applications**: Apply, shortlist/select/reject, rounds, attendance
    - **Placement**: Student placement state derived from selections
    - **Notifications**: Broadcast or targeted, with read receipts

    ## Databases
    - SQL: users, students, companies, placement drives, applications
    - MongoDB: notifications, events, resume scores
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(PortalError, portal_error_handler)

# Include API routes
app.include_router(api_router, prefix="/api")

# Uploaded resumes
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.on_event("startup")
async def startup_event():
    """Create SQL tables and MongoDB indexes."""
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception("SQL table initialization failed")
    try:
        init_mongo_indexes()
    except PyMongoError:
        logger.exception("MongoDB index initialization failed")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }

"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.student_routes import router as student_router
from app.api.routes.company_routes import router as company_router
from app.api.routes.drive_routes import router as drive_router
from app.api.routes.application_routes import router as application_router
from app.api.routes.notification_routes import router as notification_router
from app.api.routes.event_routes import router as event_router
from app.api.routes.resume_score_routes import router as resume_score_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(company_router)
api_router.include_router(drive_router)
api_router.include_router(application_router)
api_router.include_router(notification_router)
api_router.include_router(event_router)
api_router.include_router(resume_score_router)

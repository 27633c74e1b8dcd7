"""
Application Routes

GET /applications - All applications (admin)
POST /applications - Apply to a drive (multipart, optional resume file)
GET /applications/student/{student_id} - A student's applications
GET /applications/drive/{drive_id} - A drive's applications (students see only their own)
GET /applications/{id} - Get application
PUT /applications/{id}/status - Update status / round (admin)
PUT /applications/{id}/attendance - Mark present / absent (admin)
PUT /applications/{id}/round-override - Correct a round number (admin)
PUT /applications/{id}/resume - Replace the resume file (owner or admin)
DELETE /applications/{id} - Delete application (admin)
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import List, Optional

from app.core.auth import get_current_user, get_current_admin, ensure_self_or_admin
from app.schemas.schemas import (
    ApplicationResponse, ApplicationStatusUpdate, AttendanceUpdate,
    RoundOverride, MessageResponse
)
from app.services.application_service import ApplicationWorkflowService, get_workflow_service
from app.utils.file_upload import save_resume

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("", response_model=List[ApplicationResponse])
async def list_applications(
    admin: dict = Depends(get_current_admin),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    return workflow.list_all()


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply(
    student_id: int = Form(...),
    drive_id: int = Form(...),
    resume: Optional[UploadFile] = File(None),
    user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    """
    Apply to a placement drive.

    Checks, first failure wins: already applied, drive exists, student exists,
    branch eligible, percentage, deadline.
    Without a resume file the profile resume is used.
    """
    ensure_self_or_admin(user, student_id, "apply for this student")
    resume_url = await save_resume(resume) if resume is not None and resume.filename else None
    return workflow.apply(student_id, drive_id, resume_url)


@router.get("/student/{student_id}", response_model=List[ApplicationResponse])
async def list_student_applications(
    student_id: int,
    user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    ensure_self_or_admin(user, student_id)
    return workflow.list_for_student(student_id)


@router.get("/drive/{drive_id}", response_model=List[ApplicationResponse])
async def list_drive_applications(
    drive_id: int,
    user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    if user["role"] == "admin":
        return workflow.list_for_drive(drive_id)
    if user["student_id"] is None:
        return []
    return workflow.list_for_drive(drive_id, student_id=user["student_id"])


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: int,
    user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    application = workflow.get(application_id)
    ensure_self_or_admin(user, application.student_id, "view this application")
    return application


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    admin: dict = Depends(get_current_admin),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    """
    Update status and/or round.

    - absent applications cannot be updated
    - a round may only be sent together with shortlisted or selected
    - the student is notified of every status change
    """
    return workflow.update_status(
        application_id,
        status=data.status,
        current_round=data.current_round,
        next_round_date=data.next_round_date,
    )


@router.put("/{application_id}/attendance", response_model=ApplicationResponse)
async def mark_attendance(
    application_id: int,
    data: AttendanceUpdate,
    admin: dict = Depends(get_current_admin),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    """Marking absent rejects the application and notifies the student."""
    return workflow.mark_attendance(application_id, data.is_present)


@router.put("/{application_id}/round-override", response_model=ApplicationResponse)
async def override_round(
    application_id: int,
    data: RoundOverride,
    admin: dict = Depends(get_current_admin),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    return workflow.override_round(application_id, data.current_round)


@router.put("/{application_id}/resume", response_model=ApplicationResponse)
async def replace_resume(
    application_id: int,
    resume: UploadFile = File(...),
    user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    application = workflow.get(application_id)
    ensure_self_or_admin(user, application.student_id, "update this application")
    resume_url = await save_resume(resume)
    return workflow.replace_resume(application_id, resume_url)


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: int,
    admin: dict = Depends(get_current_admin),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    workflow.delete_application(application_id)
    return MessageResponse(message="Application deleted successfully")

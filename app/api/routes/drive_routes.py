"""
Placement Drive Routes

GET /drives - List drives (by drive date)
GET /drives/{id} - Get drive
GET /drives/{id}/eligibility - Can the current student apply?
POST /drives - Create drive and its calendar event (admin)
PUT /drives/{id} - Update drive, event follows (admin)
DELETE /drives/{id} - Delete drive, its applications and its event (admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_user, get_current_admin, get_current_student
from app.schemas.schemas import (
    DriveCreate, DriveUpdate, DriveResponse, EligibilityResponse, MessageResponse
)
from app.services.drive_service import DriveService, get_drive_service

router = APIRouter(prefix="/drives", tags=["Placement Drives"])


@router.get("", response_model=List[DriveResponse])
async def list_drives(
    user: dict = Depends(get_current_user),
    drives: DriveService = Depends(get_drive_service)
):
    return drives.list()


@router.get("/{drive_id}", response_model=DriveResponse)
async def get_drive(
    drive_id: int,
    user: dict = Depends(get_current_user),
    drives: DriveService = Depends(get_drive_service)
):
    return drives.get(drive_id)


@router.get("/{drive_id}/eligibility", response_model=EligibilityResponse)
async def check_eligibility(
    drive_id: int,
    student: dict = Depends(get_current_student),
    drives: DriveService = Depends(get_drive_service)
):
    """Same checks as applying, without creating anything."""
    failure = drives.eligibility(drive_id, student["student_id"])
    if failure:
        code, reason = failure
        return EligibilityResponse(eligible=False, code=code, reason=reason)
    return EligibilityResponse(eligible=True)


@router.post("", response_model=DriveResponse, status_code=201)
async def create_drive(
    data: DriveCreate,
    admin: dict = Depends(get_current_admin),
    drives: DriveService = Depends(get_drive_service)
):
    return drives.create(data)


@router.put("/{drive_id}", response_model=DriveResponse)
async def update_drive(
    drive_id: int,
    data: DriveUpdate,
    admin: dict = Depends(get_current_admin),
    drives: DriveService = Depends(get_drive_service)
):
    return drives.update(drive_id, data)


@router.delete("/{drive_id}", response_model=MessageResponse)
async def delete_drive(
    drive_id: int,
    admin: dict = Depends(get_current_admin),
    drives: DriveService = Depends(get_drive_service)
):
    """Selected students of this drive get their placement state recomputed."""
    drives.delete(drive_id)
    return MessageResponse(message="Placement drive deleted successfully")

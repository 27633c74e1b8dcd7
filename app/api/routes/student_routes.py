"""
Student Routes

GET /students - List students (admin)
POST /students - Create a student profile for a user (admin)
GET /students/user/{user_id} - Get profile by user id
GET /students/{id} - Get profile
PUT /students/{id} - Update identity fields
DELETE /students/{id} - Delete student and their applications (admin)
POST /students/{id}/placement/resync - Recompute placement state (admin)
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.core.auth import get_current_user, get_current_admin, ensure_self_or_admin
from app.schemas.schemas import StudentCreate, StudentUpdate, StudentResponse, MessageResponse
from app.services.student_service import StudentService, get_student_service
from app.services.application_service import ApplicationWorkflowService, get_workflow_service

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=List[StudentResponse])
async def list_students(
    admin: dict = Depends(get_current_admin),
    students: StudentService = Depends(get_student_service)
):
    return students.list()


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    data: StudentCreate,
    admin: dict = Depends(get_current_admin),
    students: StudentService = Depends(get_student_service)
):
    """Create a profile for an existing user. Placement fields always start empty."""
    fields = data.model_dump(exclude={"user_id"})
    return students.create(data.user_id, fields)


@router.get("/user/{user_id}", response_model=StudentResponse)
async def get_student_by_user(
    user_id: int,
    user: dict = Depends(get_current_user),
    students: StudentService = Depends(get_student_service)
):
    if user["role"] != "admin" and user["user_id"] != user_id:
        raise HTTPException(status_code=403, detail="Not authorized to access this student")
    return students.get_by_user(user_id)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: int,
    user: dict = Depends(get_current_user),
    students: StudentService = Depends(get_student_service)
):
    ensure_self_or_admin(user, student_id)
    return students.get(student_id)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    data: StudentUpdate,
    user: dict = Depends(get_current_user),
    students: StudentService = Depends(get_student_service)
):
    """
    Update identity fields. Placement fields (is_placed, placed_companies,
    selected_count) are not accepted here.
    """
    ensure_self_or_admin(user, student_id, "update this student")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return students.update(student_id, changes)


@router.delete("/{student_id}", response_model=MessageResponse)
async def delete_student(
    student_id: int,
    admin: dict = Depends(get_current_admin),
    students: StudentService = Depends(get_student_service)
):
    students.delete(student_id)
    return MessageResponse(message="Student deleted")


@router.post("/{student_id}/placement/resync", response_model=StudentResponse)
async def resync_placement(
    student_id: int,
    admin: dict = Depends(get_current_admin),
    workflow: ApplicationWorkflowService = Depends(get_workflow_service)
):
    """Repair placement fields by re-deriving them from selected applications."""
    return workflow.resync_student(student_id)

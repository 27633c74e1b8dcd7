"""
Notification Routes

GET /notifications - Notifications addressed to the current user, newest first
POST /notifications - Send a notification (admin)
PUT /notifications/mark-all-read - Mark every visible notification read
PUT /notifications/{id}/read - Mark one notification read
DELETE /notifications/{id} - Delete notification (admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_user, get_current_admin
from app.schemas.schemas import NotificationCreate, NotificationResponse, MessageResponse
from app.services.notification_service import NotificationService, get_notification_service
from app.services.student_service import StudentService, get_student_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def viewer_placement(user: dict, students: StudentService):
    """Current is_placed of a student viewer; None for admins."""
    if user["role"] == "admin":
        return None
    return students.is_placed(user["student_id"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    user: dict = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
    students: StudentService = Depends(get_student_service)
):
    """Audience is resolved at read time against the student's current placement."""
    return notifications.list_for(user, viewer_placement(user, students))


@router.post("", response_model=NotificationResponse, status_code=201)
async def create_notification(
    data: NotificationCreate,
    admin: dict = Depends(get_current_admin),
    notifications: NotificationService = Depends(get_notification_service)
):
    return notifications.create(data.title, data.message, data.recipients)


@router.put("/mark-all-read", response_model=MessageResponse)
async def mark_all_read(
    user: dict = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
    students: StudentService = Depends(get_student_service)
):
    count = notifications.mark_all_read(user, viewer_placement(user, students))
    return MessageResponse(message=f"{count} notifications marked as read")


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    user: dict = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
    students: StudentService = Depends(get_student_service)
):
    return notifications.mark_read(notification_id, user, viewer_placement(user, students))


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    admin: dict = Depends(get_current_admin),
    notifications: NotificationService = Depends(get_notification_service)
):
    notifications.delete(notification_id)
    return MessageResponse(message="Notification deleted")

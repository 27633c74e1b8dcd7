"""
Authentication Routes

POST /auth/signup - Register new user (students get a profile too)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/change-password - Change own password
GET /auth/student/profile - Get own student profile
PATCH /auth/student/profile - Update own student profile
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import IntegrityError

from app.db.postgres import get_db_session
from app.core.auth import (
    hash_password, verify_password, create_access_token,
    get_current_user, get_current_student
)
from app.models import User, Student
from app.schemas.schemas import (
    SignupRequest, LoginRequest, ChangePasswordRequest, TokenResponse,
    UserResponse, StudentResponse, StudentProfileUpdate, MessageResponse, UserRole
)
from app.services.student_service import StudentService, get_student_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_for(user: User, student_id: int = None) -> TokenResponse:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return TokenResponse(
        access_token=token,
        user=UserResponse.model_validate(user),
        student_id=student_id,
    )


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(request: SignupRequest):
    """
    Register a new account and log in.

    Student accounts must include branch, percentage, roll_number and
    mobile_number; the student profile is created in the same transaction.
    """
    email = request.email.lower()

    try:
        with get_db_session() as db:
            if db.query(User.id).filter(User.email == email).first():
                raise HTTPException(status_code=400, detail="Email already registered")

            user = User(
                name=request.name,
                email=email,
                password_hash=hash_password(request.password),
                role=request.role.value,
            )
            db.add(user)
            db.flush()

            student = None
            if request.role == UserRole.student:
                if db.query(Student.id).filter(Student.roll_number == request.roll_number).first():
                    raise HTTPException(status_code=400, detail="Roll number already registered")
                student = Student(
                    user_id=user.id,
                    name=request.name,
                    email=email,
                    roll_number=request.roll_number,
                    mobile_number=request.mobile_number,
                    branch=request.branch.value,
                    percentage=request.percentage,
                    is_placed=False,
                    placed_companies=[],
                    selected_count=0,
                )
                db.add(student)
                db.flush()
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Email or roll number already registered")

    logger.info("New %s account: %s", user.role, email)
    return _token_for(user, student.id if student else None)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = db.query(User).filter(User.email == request.email.lower()).first()
        student = db.query(Student.id).filter(Student.user_id == user.id).first() if user else None

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not verify_password(request.password, user.password_hash):
        logger.warning("Failed login for %s", user.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return _token_for(user, student[0] if student else None)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        return db.get(User, user["user_id"])


@router.post("/change-password", response_model=MessageResponse)
async def change_password(request: ChangePasswordRequest, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        account = db.get(User, user["user_id"])
        if not verify_password(request.current_password, account.password_hash):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        account.password_hash = hash_password(request.new_password)

    return MessageResponse(message="Password updated successfully")


@router.get("/student/profile", response_model=StudentResponse)
async def get_student_profile(
    user: dict = Depends(get_current_student),
    students: StudentService = Depends(get_student_service)
):
    """Get current student's profile with placement status."""
    return students.get(user["student_id"])


@router.patch("/student/profile", response_model=StudentResponse)
async def update_student_profile(
    data: StudentProfileUpdate,
    user: dict = Depends(get_current_student),
    students: StudentService = Depends(get_student_service)
):
    """Update own profile. Only provided fields are updated."""
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return students.update(user["student_id"], changes)

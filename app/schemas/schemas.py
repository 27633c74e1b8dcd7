"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

import math
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional, List, Literal, Union
from datetime import datetime, timezone
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    student = "student"


class Branch(str, Enum):
    computer_science = "Computer Science"
    information_technology = "Information Technology"
    electronics = "Electronics"
    electrical = "Electrical"
    mechanical = "Mechanical"
    civil = "Civil"
    chemical = "Chemical"
    biotechnology = "Biotechnology"
    other = "Other"


class ApplicationStatus(str, Enum):
    applied = "applied"
    shortlisted = "shortlisted"
    rejected = "rejected"
    selected = "selected"


# Statuses that can carry round progress
ROUND_STATUSES = {ApplicationStatus.shortlisted, ApplicationStatus.selected}

RecipientGroup = Literal["all", "placed", "unplaced"]


# ============================================================
# HELPERS
# ============================================================

def parse_round(value) -> int:
    """
    Coerce a round number to an int, rounding half up (2.5 -> 3).
    Accepts ints, floats and numeric strings.
    """
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise ValueError("round must be a finite number")
    return int(math.floor(number + 0.5))


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store every timestamp as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignupRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.student

    # Required when role == student
    branch: Optional[Branch] = None
    percentage: Optional[float] = Field(None, ge=0, le=100)
    roll_number: Optional[str] = Field(None, pattern=r"^[A-Za-z0-9]+$")
    mobile_number: Optional[str] = Field(None, pattern=r"^\d{10}$")

    @model_validator(mode="after")
    def student_fields_required(self):
        if self.role == UserRole.student:
            missing = [
                name for name in ("branch", "percentage", "roll_number", "mobile_number")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"All student fields are required: {', '.join(missing)}")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    is_active: bool = True
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    student_id: Optional[int] = None


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class StudentCreate(BaseModel):
    user_id: int
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    roll_number: str = Field(..., pattern=r"^[A-Za-z0-9]+$")
    mobile_number: Optional[str] = Field(None, pattern=r"^\d{10}$")
    branch: Branch
    percentage: float = Field(..., ge=0, le=100)
    resume: Optional[str] = None


class StudentUpdate(BaseModel):
    """Identity fields only. Placement state is owned by the application workflow."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    roll_number: Optional[str] = Field(None, pattern=r"^[A-Za-z0-9]+$")
    mobile_number: Optional[str] = Field(None, pattern=r"^\d{10}$")
    branch: Optional[Branch] = None
    percentage: Optional[float] = Field(None, ge=0, le=100)
    resume: Optional[str] = None


class StudentProfileUpdate(BaseModel):
    branch: Optional[Branch] = None
    percentage: Optional[float] = Field(None, ge=0, le=100)
    roll_number: Optional[str] = Field(None, pattern=r"^[A-Za-z0-9]+$")
    mobile_number: Optional[str] = Field(None, pattern=r"^\d{10}$")


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    email: str
    roll_number: str
    mobile_number: Optional[str] = None
    branch: str
    percentage: float
    resume: Optional[str] = None
    is_placed: bool
    placed_companies: List[str] = []
    selected_count: int = 0
    created_at: Optional[datetime] = None


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    logo: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    logo: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None


# ============================================================
# DRIVE SCHEMAS
# ============================================================

class CtcRange(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)

    @model_validator(mode="after")
    def max_not_below_min(self):
        if self.max < self.min:
            raise ValueError("ctc_range.max must be >= ctc_range.min")
        return self


class DriveCreate(BaseModel):
    company_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    requirements: str
    eligible_branches: List[Branch] = Field(..., min_length=1)
    minimum_percentage: float = Field(..., ge=0, le=100)
    ctc_range: CtcRange
    number_of_rounds: int = Field(..., ge=1)
    application_link: Optional[str] = None
    drive_date: datetime
    last_date_to_apply: datetime

    @field_validator("drive_date", "last_date_to_apply")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def deadline_before_drive(self):
        if self.last_date_to_apply > self.drive_date:
            raise ValueError("last_date_to_apply must be on or before drive_date")
        return self


class DriveUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    requirements: Optional[str] = None
    eligible_branches: Optional[List[Branch]] = Field(None, min_length=1)
    minimum_percentage: Optional[float] = Field(None, ge=0, le=100)
    ctc_range: Optional[CtcRange] = None
    number_of_rounds: Optional[int] = Field(None, ge=1)
    application_link: Optional[str] = None
    drive_date: Optional[datetime] = None
    last_date_to_apply: Optional[datetime] = None

    @field_validator("drive_date", "last_date_to_apply")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class DriveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    company_name: str
    title: str
    description: str
    requirements: str
    eligible_branches: List[str]
    minimum_percentage: float
    ctc_range: CtcRange
    number_of_rounds: int
    application_link: Optional[str] = None
    drive_date: datetime
    last_date_to_apply: datetime
    created_at: Optional[datetime] = None


class EligibilityResponse(BaseModel):
    eligible: bool
    code: Optional[str] = None
    reason: Optional[str] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(BaseModel):
    status: Optional[ApplicationStatus] = None
    current_round: Optional[int] = Field(None, ge=0)
    next_round_date: Optional[datetime] = None

    @field_validator("current_round", mode="before")
    @classmethod
    def round_to_int(cls, v):
        if v is None:
            return v
        return parse_round(v)

    @field_validator("next_round_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class AttendanceUpdate(BaseModel):
    is_present: bool


class RoundOverride(BaseModel):
    current_round: int = Field(..., ge=0)

    @field_validator("current_round", mode="before")
    @classmethod
    def round_to_int(cls, v):
        return parse_round(v)


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    drive_id: int
    status: ApplicationStatus
    is_present: bool
    current_round: int
    resume_url: Optional[str] = None
    next_round_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    recipients: Union[RecipientGroup, List[int]]

    @field_validator("recipients")
    @classmethod
    def non_empty_list(cls, v):
        if isinstance(v, list) and not v:
            raise ValueError("recipients list must not be empty")
        return v


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    recipients: Union[RecipientGroup, List[int]]
    read: List[int] = []
    created_at: datetime


# ============================================================
# EVENT SCHEMAS
# ============================================================

class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    date: datetime

    @field_validator("date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class EventResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    date: datetime
    drive_id: Optional[int] = None
    created_at: datetime


# ============================================================
# RESUME SCORE SCHEMAS
# ============================================================

class ResumeScoreCreate(BaseModel):
    student_id: int
    ats_score: float = Field(..., ge=0, le=100)
    technical_score: float = Field(..., ge=0, le=100)
    communication_score: float = Field(..., ge=0, le=100)
    experience_score: float = Field(..., ge=0, le=100)
    skills_score: float = Field(..., ge=0, le=100)
    overall_score: float = Field(..., ge=0, le=100)
    feedback: str


class ResumeScoreResponse(ResumeScoreCreate):
    id: str
    created_at: datetime


class ResumeScoreAverages(BaseModel):
    avg_technical: float = 0
    avg_communication: float = 0
    avg_experience: float = 0
    avg_skills: float = 0
    avg_overall: float = 0


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


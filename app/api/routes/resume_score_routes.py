"""
Resume Score Routes

GET /resume-scores/latest/{student_id} - Most recent score for a student
GET /resume-scores/history/{student_id} - All scores for a student, newest first
GET /resume-scores/averages - Averages across all scores
POST /resume-scores - Store a score
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.core.auth import get_current_user, ensure_self_or_admin
from app.schemas.schemas import ResumeScoreCreate, ResumeScoreResponse, ResumeScoreAverages
from app.services.mongo_service import ResumeScoreService

router = APIRouter(prefix="/resume-scores", tags=["Resume Scores"])


def get_resume_score_service() -> ResumeScoreService:
    return ResumeScoreService()


@router.get("/latest/{student_id}", response_model=ResumeScoreResponse)
async def get_latest_score(
    student_id: int,
    user: dict = Depends(get_current_user),
    scores: ResumeScoreService = Depends(get_resume_score_service)
):
    ensure_self_or_admin(user, student_id, "view these scores")
    score = scores.get_latest(student_id)
    if not score:
        raise HTTPException(status_code=404, detail="No resume score found")
    return score


@router.get("/history/{student_id}", response_model=List[ResumeScoreResponse])
async def get_score_history(
    student_id: int,
    user: dict = Depends(get_current_user),
    scores: ResumeScoreService = Depends(get_resume_score_service)
):
    ensure_self_or_admin(user, student_id, "view these scores")
    return scores.get_history(student_id)


@router.get("/averages", response_model=ResumeScoreAverages)
async def get_averages(
    user: dict = Depends(get_current_user),
    scores: ResumeScoreService = Depends(get_resume_score_service)
):
    return scores.get_averages()


@router.post("", response_model=ResumeScoreResponse, status_code=201)
async def create_score(
    data: ResumeScoreCreate,
    user: dict = Depends(get_current_user),
    scores: ResumeScoreService = Depends(get_resume_score_service)
):
    ensure_self_or_admin(user, data.student_id, "score this student")
    return scores.insert(data.model_dump())

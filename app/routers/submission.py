from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import require_admin, require_staff
from app.models.user import User
from app.schemas.submission import (
    ApprovalActionResponse,
    FullSubmissionDetailsResponse,
    RejectSubmissionRequest,
    SubmissionDetailsResponse,
    SubmissionListResponse,
)
from app.services.quiz_approval import QuizApprovalService
from app.services.quiz_review import QuizReviewService

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("/all", response_model=SubmissionListResponse)
async def get_all_quiz_submissions(
    current_user: Annotated[User, Depends(require_admin)],
    db: Session = Depends(get_db),
):
    """Every submission across all courses (admin only)"""
    submissions = QuizReviewService(db).get_all_quiz_submissions()
    return SubmissionListResponse(submissions=submissions)


@router.get("/{submission_id}", response_model=SubmissionDetailsResponse)
async def get_submission_details(
    submission_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Session = Depends(get_db),
):
    return QuizReviewService(db).get_submission_details(submission_id)


@router.get("/{submission_id}/full", response_model=FullSubmissionDetailsResponse)
async def get_full_submission_details(
    submission_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Session = Depends(get_db),
):
    return QuizReviewService(db).get_full_submission_details(submission_id)


@router.patch("/{submission_id}/approve", response_model=ApprovalActionResponse)
async def approve_submission(
    submission_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Session = Depends(get_db),
):
    return QuizApprovalService(db).approve_submission(submission_id, current_user.id)


@router.patch("/{submission_id}/reject", response_model=ApprovalActionResponse)
async def reject_submission(
    submission_id: int,
    reject_in: RejectSubmissionRequest,
    current_user: Annotated[User, Depends(require_staff)],
    db: Session = Depends(get_db),
):
    """Reject and wipe the learner's course progress"""
    return QuizApprovalService(db).reject_submission(
        submission_id, current_user.id, reject_in.rejection_reason
    )


@router.patch(
    "/{submission_id}/reset-attempts", response_model=ApprovalActionResponse
)
async def reset_quiz_attempts(
    submission_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Session = Depends(get_db),
):
    return QuizApprovalService(db).reset_quiz_attempts(submission_id, current_user.id)

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user, is_staff, require_author, require_staff
from app.models.user import User
from app.schemas.quiz import (
    CanAttemptResponse,
    QuizAttemptCheckResponse,
    QuizByCourseResponse,
    QuizCreate,
    QuizDeleteResponse,
    QuizDiagnosticsResponse,
    QuizSaveResponse,
    QuizSubmitRequest,
    QuizSubmitResponse,
)
from app.schemas.submission import (
    QuizHistoryResponse,
    QuizResultsResponse,
    SubmissionListResponse,
)
from app.services.quiz import QuizService
from app.services.quiz_eligibility import QuizEligibilityService
from app.services.quiz_review import QuizReviewService
from app.services.quiz_submission import QuizSubmissionService

router = APIRouter(tags=["quiz"])


# ==================== Course-scoped ====================


@router.post("/courses/{course_id}/quiz", response_model=QuizSaveResponse)
async def save_quiz(
    course_id: int,
    quiz_in: QuizCreate,
    current_user: Annotated[User, Depends(require_author)],
    db: Session = Depends(get_db),
):
    """Create the course quiz or replace the active one (instructor/admin)"""
    return QuizService(db).save_quiz(course_id, quiz_in, created_by=current_user.id)


@router.get("/courses/{course_id}/quiz", response_model=QuizByCourseResponse)
async def get_quiz_by_course(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    quiz = QuizService(db).get_quiz_by_course(
        course_id, include_answers=is_staff(current_user)
    )
    if not quiz:
        return QuizByCourseResponse(quiz=None, message="No quiz found for this course")
    return QuizByCourseResponse(quiz=quiz)


@router.get("/courses/{course_id}/quiz/can-attempt", response_model=CanAttemptResponse)
async def can_attempt_quiz(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    can_attempt = QuizEligibilityService(db).can_attempt_quiz(course_id, current_user.id)
    return CanAttemptResponse(can_attempt=can_attempt)


@router.get("/courses/{course_id}/quiz/history", response_model=QuizHistoryResponse)
async def get_quiz_history(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    history = QuizReviewService(db).get_user_quiz_history(course_id, current_user.id)
    return QuizHistoryResponse(history=history)


@router.get(
    "/courses/{course_id}/quiz/submissions", response_model=SubmissionListResponse
)
async def get_course_quiz_submissions(
    course_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Session = Depends(get_db),
):
    submissions = QuizReviewService(db).get_course_quiz_submissions(
        course_id, current_user
    )
    return SubmissionListResponse(submissions=submissions)


@router.get(
    "/courses/{course_id}/quiz/results/{submission_id}",
    response_model=QuizResultsResponse,
)
async def get_quiz_results(
    course_id: int,
    submission_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return QuizReviewService(db).get_quiz_results(
        submission_id, current_user, course_id=course_id
    )


# ==================== Quiz-scoped ====================


@router.delete("/quizzes/{quiz_id}", response_model=QuizDeleteResponse)
async def delete_quiz(
    quiz_id: int,
    current_user: Annotated[User, Depends(require_author)],
    db: Session = Depends(get_db),
):
    return QuizService(db).delete_quiz(quiz_id)


@router.get(
    "/quizzes/{quiz_id}/check-attempt", response_model=QuizAttemptCheckResponse
)
async def check_quiz_attempt(
    quiz_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return QuizEligibilityService(db).check_quiz_attempt(quiz_id, current_user.id)


@router.post("/quizzes/{quiz_id}/submit", response_model=QuizSubmitResponse)
async def submit_quiz(
    quiz_id: int,
    submit_in: QuizSubmitRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    """Score and store the caller's single attempt"""
    return QuizSubmissionService(db).submit_quiz_answers(
        quiz_id, current_user.id, submit_in.answers, submit_in.time_taken
    )


@router.get(
    "/quizzes/{quiz_id}/diagnostics", response_model=QuizDiagnosticsResponse
)
async def get_quiz_diagnostics(
    quiz_id: int,
    current_user: Annotated[User, Depends(require_author)],
    db: Session = Depends(get_db),
):
    return QuizService(db).get_quiz_diagnostics(quiz_id)

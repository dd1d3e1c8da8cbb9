# app/services/quiz_eligibility.py
import logging

from sqlalchemy.orm import Session

from app.models.quiz_submission import QuizSubmission
from app.schemas.quiz import QuizAttemptCheckResponse
from app.services.progress import ProgressService

logger = logging.getLogger(__name__)


class QuizEligibilityService:
    def __init__(self, db: Session):
        self.db = db
        self.progress_service = ProgressService(db)

    def can_attempt_quiz(self, course_id: int, user_id: int) -> bool:
        """
        A learner may take the course quiz once every chapter of the course is
        completed. A course without chapters is never attemptable.
        """
        total = self.progress_service.get_course_total_chapters(course_id)
        if total == 0:
            return False

        completed = self.progress_service.get_user_completed_chapter_count(
            course_id, user_id
        )
        logger.debug(
            f"Eligibility for user {user_id} in course {course_id}: {completed}/{total}"
        )
        return completed == total

    def count_attempts(self, quiz_id: int, user_id: int) -> int:
        return (
            self.db.query(QuizSubmission)
            .filter(QuizSubmission.quiz_id == quiz_id, QuizSubmission.user_id == user_id)
            .count()
        )

    def check_quiz_attempt(self, quiz_id: int, user_id: int) -> QuizAttemptCheckResponse:
        attempt_count = self.count_attempts(quiz_id, user_id)
        can_attempt = attempt_count == 0

        return QuizAttemptCheckResponse(
            can_attempt=can_attempt,
            attempt_count=attempt_count,
            message=(
                "You can attempt this quiz"
                if can_attempt
                else "You have already attempted this quiz"
            ),
        )

# app/services/quiz_approval.py
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models.quiz import Quiz
from app.models.quiz_submission import (
    APPROVAL_APPROVED,
    QuizSubmission,
    QuizSubmissionRejectionLog,
)
from app.schemas.submission import ApprovalActionResponse
from app.services.progress import ProgressService

logger = logging.getLogger(__name__)


class QuizApprovalService:
    """Staff decisions on learner submissions"""

    def __init__(self, db: Session):
        self.db = db
        self.progress_service = ProgressService(db)

    def _get_submission(self, submission_id: int) -> QuizSubmission:
        submission = (
            self.db.query(QuizSubmission)
            .filter(QuizSubmission.id == submission_id)
            .first()
        )
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    def approve_submission(
        self, submission_id: int, staff_user_id: int
    ) -> ApprovalActionResponse:
        submission = self._get_submission(submission_id)

        try:
            submission.approval_status = APPROVAL_APPROVED
            submission.approved_by = staff_user_id
            submission.approved_at = datetime.now(timezone.utc)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to approve submission {submission_id}: {e}")
            raise

        logger.info(f"Submission {submission_id} approved by user {staff_user_id}")
        return ApprovalActionResponse(
            message="Submission approved successfully",
            submission_id=submission_id,
        )

    def reject_submission(
        self,
        submission_id: int,
        staff_user_id: int,
        rejection_reason: Optional[str],
    ) -> ApprovalActionResponse:
        """
        Delete the submission and its answers, wipe the learner's lesson
        progress for the whole course and append a rejection log entry.
        The learner has to complete the course again before re-attempting.
        """
        if not rejection_reason or not rejection_reason.strip():
            raise ValidationError("Rejection reason is required")

        submission = self._get_submission(submission_id)
        quiz = self.db.query(Quiz).filter(Quiz.id == submission.quiz_id).first()
        if not quiz:
            raise NotFoundError("Quiz not found for this submission")

        quiz_id = submission.quiz_id
        user_id = submission.user_id
        course_id = quiz.course_id

        try:
            # Answers go with the submission (delete-orphan cascade)
            self.db.delete(submission)
            self.progress_service.delete_lesson_progress(course_id, user_id)
            self.db.add(
                QuizSubmissionRejectionLog(
                    submission_id=submission_id,
                    staff_user_id=staff_user_id,
                    employee_user_id=user_id,
                    course_id=course_id,
                    quiz_id=quiz_id,
                    rejection_reason=rejection_reason.strip(),
                )
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to reject submission {submission_id}: {e}")
            raise

        logger.info(
            f"Submission {submission_id} rejected by user {staff_user_id}; "
            f"progress of user {user_id} in course {course_id} reset"
        )
        return ApprovalActionResponse(
            message=(
                "Submission rejected successfully. Employee's course progress has "
                "been reset to 0% and must complete the course again from the beginning."
            ),
            submission_id=submission_id,
            quiz_id=quiz_id,
            user_id=user_id,
            course_id=course_id,
        )

    def reset_quiz_attempts(
        self, submission_id: int, staff_user_id: int
    ) -> ApprovalActionResponse:
        """Remove the attempt so the learner can retake; lesson progress stays"""
        submission = self._get_submission(submission_id)
        quiz_id = submission.quiz_id
        user_id = submission.user_id

        try:
            self.db.delete(submission)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to reset attempts for submission {submission_id}: {e}")
            raise

        logger.info(
            f"Quiz {quiz_id} attempts of user {user_id} reset by user {staff_user_id}"
        )
        return ApprovalActionResponse(
            message="Quiz attempts have been reset successfully. Employee can now retake the quiz.",
            submission_id=submission_id,
            quiz_id=quiz_id,
            user_id=user_id,
        )

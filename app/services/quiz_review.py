# app/services/quiz_review.py
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.dependencies import is_staff
from app.core.exceptions import AuthorizationError, NotFoundError
from app.models.course import Course
from app.models.quiz import Quiz, QuizOption, QuizQuestion
from app.models.quiz_submission import QuizSubmission
from app.models.user import User
from app.schemas.submission import (
    FullSubmissionDetailsResponse,
    FullSubmissionHeader,
    QuizHistoryItem,
    QuizResultsResponse,
    ReviewOption,
    ReviewQuestion,
    StudentAnswer,
    SubmissionAnswerResult,
    SubmissionDetailsResponse,
    SubmissionSummary,
)

logger = logging.getLogger(__name__)


class QuizReviewService:
    """Read-only projections over submissions for learners and staff"""

    def __init__(self, db: Session):
        self.db = db

    # ==================== Helpers ====================

    def _summary_query(self):
        return (
            self.db.query(QuizSubmission, Quiz, Course, User)
            .join(Quiz, QuizSubmission.quiz_id == Quiz.id)
            .join(Course, Quiz.course_id == Course.id)
            .join(User, QuizSubmission.user_id == User.id)
            .order_by(QuizSubmission.submitted_at.desc(), QuizSubmission.id.desc())
        )

    @staticmethod
    def _to_summary(
        submission: QuizSubmission, quiz: Quiz, course: Course, user: User
    ) -> dict:
        return dict(
            submission_id=submission.id,
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            course_id=course.id,
            course_name=course.title,
            passing_score=quiz.passing_score,
            user_id=user.id,
            name=user.name,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            score=submission.score,
            passed=submission.passed,
            total_questions=submission.total_questions,
            correct_answers=submission.correct_answers,
            time_taken=submission.time_taken,
            submitted_at=submission.submitted_at,
            attempt_number=submission.attempt_number,
            approval_status=submission.approval_status,
        )

    def _get_submission_row(self, submission_id: int):
        row = self._summary_query().filter(QuizSubmission.id == submission_id).first()
        if not row:
            raise NotFoundError("Submission not found")
        return row

    def _correct_option_texts(self, question_ids: Iterable[int]) -> Dict[int, str]:
        """Current correct option text per question id"""
        question_ids = list(set(question_ids))
        if not question_ids:
            return {}
        options = (
            self.db.query(QuizOption)
            .filter(
                QuizOption.question_id.in_(question_ids),
                QuizOption.is_correct.is_(True),
            )
            .order_by(QuizOption.option_order)
            .all()
        )
        texts: Dict[int, str] = {}
        for option in options:
            texts.setdefault(option.question_id, option.option_text)
        return texts

    def _answer_results(
        self, submission: QuizSubmission, include_correct: bool
    ) -> List[SubmissionAnswerResult]:
        correct_texts = (
            self._correct_option_texts(a.question_id for a in submission.answers)
            if include_correct
            else {}
        )
        return [
            SubmissionAnswerResult(
                id=answer.id,
                question_id=answer.question_id,
                question_text=answer.question_text,
                selected_option_id=answer.selected_option_id,
                selected_option_text=answer.selected_option_text,
                is_correct=answer.is_correct,
                correct_option_text=correct_texts.get(answer.question_id),
            )
            for answer in submission.answers
        ]

    # ==================== Learner ====================

    def get_quiz_results(
        self, submission_id: int, viewer: User, course_id: Optional[int] = None
    ) -> QuizResultsResponse:
        """
        Submission with its answers.
        Learners may only read their own submission and see answers only when
        the quiz shows results; correct option texts only when it shows them.
        """
        submission = (
            self.db.query(QuizSubmission)
            .options(selectinload(QuizSubmission.answers))
            .filter(QuizSubmission.id == submission_id)
            .first()
        )
        if not submission:
            raise NotFoundError("Submission not found")

        quiz = self.db.query(Quiz).filter(Quiz.id == submission.quiz_id).first()
        if course_id is not None and quiz.course_id != course_id:
            raise NotFoundError("Submission not found")

        staff = is_staff(viewer)
        if not staff and submission.user_id != viewer.id:
            raise AuthorizationError("You can only view your own quiz results")

        answers = None
        if staff or quiz.show_results:
            answers = self._answer_results(
                submission, include_correct=staff or quiz.show_correct_answers
            )

        return QuizResultsResponse(
            id=submission.id,
            quiz_id=submission.quiz_id,
            user_id=submission.user_id,
            score=submission.score,
            passed=submission.passed,
            total_questions=submission.total_questions,
            correct_answers=submission.correct_answers,
            time_taken=submission.time_taken,
            submitted_at=submission.submitted_at,
            attempt_number=submission.attempt_number,
            approval_status=submission.approval_status,
            answers=answers,
        )

    def get_user_quiz_history(self, course_id: int, user_id: int) -> List[QuizHistoryItem]:
        submissions = (
            self.db.query(QuizSubmission)
            .join(Quiz, QuizSubmission.quiz_id == Quiz.id)
            .filter(Quiz.course_id == course_id, QuizSubmission.user_id == user_id)
            .order_by(QuizSubmission.submitted_at.desc(), QuizSubmission.id.desc())
            .all()
        )
        return [QuizHistoryItem.model_validate(s) for s in submissions]

    # ==================== Staff ====================

    def get_course_quiz_submissions(
        self, course_id: int, viewer: User
    ) -> List[SubmissionSummary]:
        """Instructors only see submissions of courses they created"""
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise NotFoundError("Course not found")

        if viewer.role == "instructor" and course.created_by != viewer.id:
            logger.warning(
                f"Instructor {viewer.id} denied submissions of course {course_id}"
            )
            raise AuthorizationError(
                "You can only view submissions for courses you created"
            )

        rows = self._summary_query().filter(Course.id == course_id).all()
        return [SubmissionSummary(**self._to_summary(*row)) for row in rows]

    def get_all_quiz_submissions(self) -> List[SubmissionSummary]:
        rows = self._summary_query().all()
        return [SubmissionSummary(**self._to_summary(*row)) for row in rows]

    def get_submission_details(self, submission_id: int) -> SubmissionDetailsResponse:
        submission, quiz, course, user = self._get_submission_row(submission_id)

        return SubmissionDetailsResponse(
            **self._to_summary(submission, quiz, course, user),
            evaluation_status="Pass" if submission.passed else "Fail",
            answers=self._answer_results(submission, include_correct=True),
        )

    def get_full_submission_details(
        self, submission_id: int
    ) -> FullSubmissionDetailsResponse:
        """
        Every current question of the quiz with all options and the learner's
        answer. Questions the learner skipped get an empty answer.
        """
        submission, quiz, course, user = self._get_submission_row(submission_id)

        questions = (
            self.db.query(QuizQuestion)
            .options(selectinload(QuizQuestion.options))
            .filter(QuizQuestion.quiz_id == quiz.id)
            .order_by(QuizQuestion.question_order)
            .all()
        )
        answers_by_question = {a.question_id: a for a in submission.answers}

        review_questions = []
        for question in questions:
            answer = answers_by_question.get(question.id)
            review_questions.append(
                ReviewQuestion(
                    question_id=question.id,
                    question_text=question.question,
                    explanation=question.explanation,
                    options=[
                        ReviewOption(
                            option_id=option.id,
                            option_text=option.option_text,
                            is_correct=option.is_correct,
                        )
                        for option in question.options
                    ],
                    student_answer=(
                        StudentAnswer(
                            selected_option_id=answer.selected_option_id,
                            selected_option_text=answer.selected_option_text,
                            is_correct=answer.is_correct,
                        )
                        if answer
                        else StudentAnswer()
                    ),
                )
            )

        return FullSubmissionDetailsResponse(
            submission=FullSubmissionHeader(
                id=submission.id,
                student_name=user.name,
                student_email=user.email,
                course_id=course.id,
                course_name=course.title,
                quiz_id=quiz.id,
                quiz_title=quiz.title,
                quiz_description=quiz.description,
                score=submission.score,
                total_questions=submission.total_questions,
                correct_answers=submission.correct_answers,
                passed=submission.passed,
                passing_score=quiz.passing_score,
                time_taken=submission.time_taken,
                submitted_at=submission.submitted_at,
                attempt_number=submission.attempt_number,
                approval_status=submission.approval_status,
                approved_by=submission.approved_by,
                approved_at=submission.approved_at,
                rejection_reason=submission.rejection_reason,
            ),
            questions=review_questions,
        )

# app/services/quiz.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.course import Course
from app.models.quiz import Quiz, QuizOption, QuizQuestion
from app.schemas.quiz import (
    QuizCreate,
    QuizDeleteResponse,
    QuizDiagnosticIssue,
    QuizDiagnosticsResponse,
    QuizDiagnosticsSummary,
    QuizOptionResponse,
    QuizQuestionCreate,
    QuizQuestionResponse,
    QuizResponse,
    QuizSaveResponse,
)

logger = logging.getLogger(__name__)


class QuizService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== Helpers ====================

    def get_active_quiz(self, course_id: int) -> Optional[Quiz]:
        return (
            self.db.query(Quiz)
            .options(selectinload(Quiz.questions).selectinload(QuizQuestion.options))
            .filter(Quiz.course_id == course_id, Quiz.is_active.is_(True))
            .order_by(Quiz.id.desc())
            .first()
        )

    @staticmethod
    def _validate_definition(quiz_in: QuizCreate) -> None:
        if not quiz_in.title or not quiz_in.title.strip():
            raise ValidationError("Quiz title is required")
        if not quiz_in.questions:
            raise ValidationError("Quiz must contain at least one question")

        for index, question in enumerate(quiz_in.questions, start=1):
            if not question.question or not question.question.strip():
                raise ValidationError(f"Question {index} has no text")
            if len(question.options) < 2:
                raise ValidationError(f"Question {index} needs at least two options")
            correct = sum(1 for option in question.options if option.is_correct)
            if correct != 1:
                raise ValidationError(
                    f"Question {index} must have exactly one correct option (found {correct})"
                )

    @staticmethod
    def _build_question(order: int, question_in: QuizQuestionCreate) -> QuizQuestion:
        question = QuizQuestion(
            question=question_in.question,
            explanation=question_in.explanation,
            question_order=order,
        )
        question.options = [
            QuizOption(
                option_text=option_in.text,
                is_correct=option_in.is_correct,
                option_order=option_order,
            )
            for option_order, option_in in enumerate(question_in.options, start=1)
        ]
        return question

    # ==================== Authoring ====================

    def save_quiz(
        self, course_id: int, quiz_in: QuizCreate, created_by: int
    ) -> QuizSaveResponse:
        """
        Create the course quiz or fully replace the active one.

        Replacement keeps the quiz id and settings row, deletes every existing
        question and option and inserts the new set. Submissions are never
        touched. Everything happens in one transaction.
        """
        self._validate_definition(quiz_in)

        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise NotFoundError("Course not found")

        passing_score = (
            quiz_in.passing_score
            if quiz_in.passing_score is not None
            else settings.quiz_default_passing_score
        )

        try:
            quiz = self.get_active_quiz(course_id)

            if quiz:
                quiz.title = quiz_in.title
                quiz.description = quiz_in.description
                quiz.passing_score = passing_score
                quiz.time_limit = quiz_in.time_limit
                quiz.show_results = quiz_in.show_results
                quiz.show_correct_answers = quiz_in.show_correct_answers
                # Old rows must be gone before the new orders are inserted
                quiz.questions.clear()
                self.db.flush()
                action = "updated"
            else:
                quiz = Quiz(
                    course_id=course_id,
                    title=quiz_in.title,
                    description=quiz_in.description,
                    passing_score=passing_score,
                    time_limit=quiz_in.time_limit,
                    show_results=quiz_in.show_results,
                    show_correct_answers=quiz_in.show_correct_answers,
                    created_by=created_by,
                    is_active=True,
                )
                self.db.add(quiz)
                action = "created"

            for order, question_in in enumerate(quiz_in.questions, start=1):
                quiz.questions.append(self._build_question(order, question_in))

            self.db.commit()
            self.db.refresh(quiz)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save quiz for course {course_id}: {e}")
            raise

        logger.info(
            f"Quiz {quiz.id} {action} for course {course_id} "
            f"with {len(quiz_in.questions)} questions by user {created_by}"
        )
        return QuizSaveResponse(quiz_id=quiz.id)

    def get_quiz_by_course(
        self, course_id: int, include_answers: bool = False
    ) -> Optional[QuizResponse]:
        """Active quiz of the course; correct flags only when include_answers"""
        quiz = self.get_active_quiz(course_id)
        if not quiz:
            return None

        return QuizResponse(
            id=quiz.id,
            course_id=quiz.course_id,
            title=quiz.title,
            description=quiz.description,
            passing_score=quiz.passing_score,
            time_limit=quiz.time_limit,
            show_results=quiz.show_results,
            show_correct_answers=quiz.show_correct_answers,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
            questions=[
                QuizQuestionResponse(
                    id=question.id,
                    question=question.question,
                    explanation=question.explanation,
                    options=[
                        QuizOptionResponse(
                            id=option.id,
                            text=option.option_text,
                            is_correct=option.is_correct if include_answers else None,
                        )
                        for option in question.options
                    ],
                )
                for question in quiz.questions
            ],
        )

    def delete_quiz(self, quiz_id: int) -> QuizDeleteResponse:
        """Soft delete; calling it again on an inactive quiz is a no-op"""
        quiz = self.db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundError("Quiz not found")

        if quiz.is_active:
            try:
                quiz.is_active = False
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            logger.info(f"Quiz {quiz_id} deactivated")

        return QuizDeleteResponse()

    def get_quiz_diagnostics(self, quiz_id: int) -> QuizDiagnosticsResponse:
        quiz = (
            self.db.query(Quiz)
            .options(selectinload(Quiz.questions).selectinload(QuizQuestion.options))
            .filter(Quiz.id == quiz_id)
            .first()
        )
        if not quiz:
            raise NotFoundError("Quiz not found")

        issues: List[QuizDiagnosticIssue] = []
        for question in quiz.questions:
            correct = sum(1 for option in question.options if option.is_correct)
            if correct == 0:
                issues.append(
                    QuizDiagnosticIssue(
                        type="NO_CORRECT_ANSWER",
                        question_id=question.id,
                        question=question.question,
                        message="Question has no correct answer marked",
                    )
                )
            elif correct > 1:
                issues.append(
                    QuizDiagnosticIssue(
                        type="MULTIPLE_CORRECT_ANSWERS",
                        question_id=question.id,
                        question=question.question,
                        message=f"Question has {correct} correct answers marked",
                    )
                )

        return QuizDiagnosticsResponse(
            quiz_id=quiz.id,
            has_issues=bool(issues),
            issues=issues,
            summary=QuizDiagnosticsSummary(
                total_questions=len(quiz.questions),
                questions_without_correct_answer=sum(
                    1 for issue in issues if issue.type == "NO_CORRECT_ANSWER"
                ),
                questions_with_multiple_correct_answers=sum(
                    1 for issue in issues if issue.type == "MULTIPLE_CORRECT_ANSWERS"
                ),
            ),
        )

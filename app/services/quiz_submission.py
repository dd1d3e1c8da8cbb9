# app/services/quiz_submission.py
import logging
from typing import Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.exceptions import (
    DuplicateAttemptError,
    InvalidAnswerError,
    NotFoundError,
    ValidationError,
)
from app.models.quiz import Quiz, QuizQuestion
from app.models.quiz_submission import QuizAnswer, QuizSubmission
from app.schemas.quiz import QuizAnswerSubmit, QuizSubmitResponse
from app.services.quiz_eligibility import QuizEligibilityService

logger = logging.getLogger(__name__)


def calculate_score(correct_answers: int, total_questions: int) -> float:
    """Percentage of correct answers; a quiz without questions scores 0"""
    if total_questions == 0:
        return 0.0
    return correct_answers * 100 / total_questions


class QuizSubmissionService:
    def __init__(self, db: Session):
        self.db = db
        self.eligibility = QuizEligibilityService(db)

    def submit_quiz_answers(
        self,
        quiz_id: int,
        user_id: int,
        answers: List[QuizAnswerSubmit],
        time_taken: int = 0,
    ) -> QuizSubmitResponse:
        """
        Score and persist a learner's single attempt.

        Every answer must name a question of this quiz and an option of that
        question. Unanswered questions count as wrong. Submission and answers
        are written in one transaction; a concurrent second attempt loses on
        the (quiz_id, user_id) unique constraint.
        """
        quiz = (
            self.db.query(Quiz)
            .options(selectinload(Quiz.questions).selectinload(QuizQuestion.options))
            .filter(Quiz.id == quiz_id, Quiz.is_active.is_(True))
            .first()
        )
        if not quiz:
            raise NotFoundError("Quiz not found")

        previous_attempts = self.eligibility.count_attempts(quiz_id, user_id)
        if previous_attempts > 0:
            logger.warning(f"User {user_id} tried to re-attempt quiz {quiz_id}")
            raise DuplicateAttemptError()

        if settings.quiz_require_course_completion and not (
            self.eligibility.can_attempt_quiz(quiz.course_id, user_id)
        ):
            raise ValidationError(
                "Complete all course chapters before attempting the quiz"
            )

        questions: Dict[int, QuizQuestion] = {q.id: q for q in quiz.questions}
        total_questions = len(questions)

        answer_rows = []
        seen_questions = set()
        correct_answers = 0
        for answer in answers:
            question = questions.get(answer.question_id)
            if question is None:
                raise InvalidAnswerError(
                    f"Question {answer.question_id} does not belong to this quiz"
                )
            if answer.question_id in seen_questions:
                raise InvalidAnswerError(
                    f"Question {answer.question_id} was answered more than once"
                )
            seen_questions.add(answer.question_id)

            option = next(
                (o for o in question.options if o.id == answer.selected_option_id),
                None,
            )
            if option is None:
                raise InvalidAnswerError(
                    f"Option {answer.selected_option_id} does not belong to question {answer.question_id}"
                )

            if option.is_correct:
                correct_answers += 1

            answer_rows.append(
                QuizAnswer(
                    question_id=question.id,
                    selected_option_id=option.id,
                    is_correct=bool(option.is_correct),
                    question_text=question.question,
                    selected_option_text=option.option_text,
                )
            )

        score = calculate_score(correct_answers, total_questions)
        passed = score >= quiz.passing_score

        submission = QuizSubmission(
            quiz_id=quiz_id,
            user_id=user_id,
            score=round(score, 2),
            passed=passed,
            total_questions=total_questions,
            correct_answers=correct_answers,
            time_taken=time_taken,
            attempt_number=previous_attempts + 1,
        )
        submission.answers = answer_rows

        try:
            self.db.add(submission)
            self.db.commit()
            self.db.refresh(submission)
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                f"Concurrent attempt by user {user_id} on quiz {quiz_id} rejected"
            )
            raise DuplicateAttemptError()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save submission for quiz {quiz_id}: {e}")
            raise

        logger.info(
            f"Submission {submission.id} created: user {user_id}, quiz {quiz_id}, "
            f"{correct_answers}/{total_questions} correct, score {score:.2f}, "
            f"passed={passed}"
        )

        return QuizSubmitResponse(
            submission_id=submission.id,
            score=score,
            passed=passed,
            correct_answers=correct_answers,
            total_questions=total_questions,
            time_taken=time_taken,
        )

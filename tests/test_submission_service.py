import pytest

from app.core.config import settings
from app.core.exceptions import (
    DuplicateAttemptError,
    InvalidAnswerError,
    NotFoundError,
    ValidationError,
)
from app.models import QuizAnswer, QuizSubmission
from app.schemas.quiz import QuizAnswerSubmit
from app.services.quiz import QuizService
from app.services.quiz_eligibility import QuizEligibilityService
from app.services.quiz_submission import QuizSubmissionService, calculate_score
from conftest import answer_key, complete_course


def submit(db, quiz, user, answers, time_taken=0):
    return QuizSubmissionService(db).submit_quiz_answers(
        quiz.id, user.id, [QuizAnswerSubmit(**a) for a in answers], time_taken
    )


class TestCalculateScore:
    def test_percentage(self):
        assert calculate_score(1, 2) == 50
        assert calculate_score(3, 5) == 60
        assert calculate_score(2, 3) == pytest.approx(66.6667, rel=1e-4)

    def test_no_questions_scores_zero(self):
        assert calculate_score(0, 0) == 0


class TestSubmitQuizAnswers:
    """Scoring engine"""

    def test_all_correct(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author, num_questions=4)

        result = submit(db, quiz, learner, answer_key(quiz), time_taken=125)

        assert result.score == 100
        assert result.passed is True
        assert result.correct_answers == 4
        assert result.total_questions == 4
        assert result.time_taken == 125

        submission = db.query(QuizSubmission).filter_by(id=result.submission_id).one()
        assert submission.attempt_number == 1
        assert submission.approval_status == "pending"
        assert submission.score == 100
        assert len(submission.answers) == 4

    def test_unanswered_question_counts_as_wrong(
        self, db, make_user, make_course, make_quiz
    ):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author, num_questions=2)

        result = submit(db, quiz, learner, answer_key(quiz)[:1])

        assert result.total_questions == 2
        assert result.correct_answers == 1
        assert result.score == 50
        assert result.passed is False
        assert db.query(QuizAnswer).count() == 1

    def test_passing_score_is_inclusive(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author, num_questions=5, passing_score=60)

        result = submit(db, quiz, learner, answer_key(quiz, correct=3))

        assert result.score == 60
        assert result.passed is True

    def test_just_below_passing_score(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author, num_questions=3, passing_score=70)

        result = submit(db, quiz, learner, answer_key(quiz, correct=2))

        assert result.score == pytest.approx(66.67, abs=0.01)
        assert result.passed is False
        stored = db.query(QuizSubmission).one()
        assert stored.score == pytest.approx(66.67)

    def test_empty_answers_are_accepted(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)

        result = submit(db, quiz, learner, [])

        assert result.score == 0
        assert result.correct_answers == 0
        assert result.passed is False

    def test_answers_snapshot_texts(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author, num_questions=1)

        submit(db, quiz, learner, answer_key(quiz, correct=0))

        answer = db.query(QuizAnswer).one()
        assert answer.question_text == "Question 1?"
        assert answer.selected_option_text == "Q1 A"
        assert answer.is_correct is False

    def test_second_attempt_is_rejected(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        submit(db, quiz, learner, answer_key(quiz))

        with pytest.raises(DuplicateAttemptError) as exc:
            submit(db, quiz, learner, answer_key(quiz))

        assert exc.value.status_code == 409
        assert "already attempted" in exc.value.message
        assert db.query(QuizSubmission).count() == 1

    def test_concurrent_loser_gets_duplicate_error(
        self, db, make_user, make_course, make_quiz, monkeypatch
    ):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        submit(db, quiz, learner, answer_key(quiz))

        # Simulate a racing request that passed the pre-check before the first commit
        monkeypatch.setattr(QuizEligibilityService, "count_attempts", lambda *a: 0)

        with pytest.raises(DuplicateAttemptError):
            submit(db, quiz, learner, answer_key(quiz))

        assert db.query(QuizSubmission).count() == 1
        assert db.query(QuizAnswer).count() == 2

    def test_other_learners_are_independent(
        self, db, make_user, make_course, make_quiz
    ):
        author = make_user("instructor")
        first, second = make_user(), make_user()
        quiz = make_quiz(make_course(), author)

        submit(db, quiz, first, answer_key(quiz))
        submit(db, quiz, second, answer_key(quiz, correct=0))

        assert db.query(QuizSubmission).count() == 2

    def test_option_from_another_question(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        first, second = quiz.questions
        answers = [
            {"question_id": first.id, "selected_option_id": second.options[1].id}
        ]

        with pytest.raises(InvalidAnswerError):
            submit(db, quiz, learner, answers)

        assert db.query(QuizSubmission).count() == 0
        assert db.query(QuizAnswer).count() == 0

    def test_question_from_another_quiz(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(title="Course A"), author)
        other = make_quiz(make_course(title="Course B"), author)
        answers = answer_key(quiz)[:1] + answer_key(other)[:1]

        with pytest.raises(InvalidAnswerError):
            submit(db, quiz, learner, answers)

        assert db.query(QuizSubmission).count() == 0
        assert db.query(QuizAnswer).count() == 0

    def test_duplicate_question_in_one_submission(
        self, db, make_user, make_course, make_quiz
    ):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        answers = answer_key(quiz)
        answers.append(dict(answers[0]))

        with pytest.raises(InvalidAnswerError):
            submit(db, quiz, learner, answers)

        assert db.query(QuizSubmission).count() == 0

    def test_unknown_quiz(self, db, make_user):
        learner = make_user()
        with pytest.raises(NotFoundError):
            QuizSubmissionService(db).submit_quiz_answers(777, learner.id, [])

    def test_inactive_quiz(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        QuizService(db).delete_quiz(quiz.id)

        with pytest.raises(NotFoundError):
            submit(db, quiz, learner, [])

    def test_course_completion_gate(
        self, db, make_user, make_course, make_quiz, monkeypatch
    ):
        monkeypatch.setattr(settings, "quiz_require_course_completion", True)
        author, learner = make_user("instructor"), make_user()
        course = make_course(chapters=2)
        quiz = make_quiz(course, author)

        with pytest.raises(ValidationError):
            submit(db, quiz, learner, answer_key(quiz))

        complete_course(db, course, learner)
        result = submit(db, quiz, learner, answer_key(quiz))
        assert result.passed is True


class TestEligibility:
    def test_all_chapters_completed(self, db, make_user, make_course):
        learner = make_user()
        course = make_course(chapters=3)
        complete_course(db, course, learner)

        assert QuizEligibilityService(db).can_attempt_quiz(course.id, learner.id) is True

    def test_partial_completion(self, db, make_user, make_course):
        learner = make_user()
        course = make_course(chapters=5)
        complete_course(db, course, learner, chapters=4)

        assert QuizEligibilityService(db).can_attempt_quiz(course.id, learner.id) is False

    def test_course_without_chapters(self, db, make_user, make_course):
        learner = make_user()
        course = make_course(chapters=0)

        assert QuizEligibilityService(db).can_attempt_quiz(course.id, learner.id) is False

    def test_progress_in_other_course_does_not_count(self, db, make_user, make_course):
        learner = make_user()
        course = make_course(chapters=2, title="Course A")
        other = make_course(chapters=2, title="Course B")
        complete_course(db, other, learner)

        assert QuizEligibilityService(db).can_attempt_quiz(course.id, learner.id) is False

    def test_check_quiz_attempt(self, db, make_user, make_course, make_quiz):
        author, learner = make_user("instructor"), make_user()
        quiz = make_quiz(make_course(), author)
        service = QuizEligibilityService(db)

        before = service.check_quiz_attempt(quiz.id, learner.id)
        submit(db, quiz, learner, answer_key(quiz))
        after = service.check_quiz_attempt(quiz.id, learner.id)

        assert (before.can_attempt, before.attempt_count) == (True, 0)
        assert before.message == "You can attempt this quiz"
        assert (after.can_attempt, after.attempt_count) == (False, 1)
        assert after.message == "You have already attempted this quiz"

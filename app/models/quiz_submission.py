# app/models/quiz_submission.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from app.core.database import Base

APPROVAL_PENDING = "pending"
APPROVAL_APPROVED = "approved"
APPROVAL_REJECTED = "rejected"


class QuizSubmission(Base):
    __tablename__ = "quiz_submissions"

    id = Column(Integer, primary_key=True, index=True)

    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Result
    score = Column(Numeric(5, 2, asdecimal=False), nullable=False)  # 0..100
    passed = Column(Boolean, nullable=False)
    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False)
    time_taken = Column(Integer, default=0, nullable=False)  # seconds
    attempt_number = Column(Integer, default=1, nullable=False)
    submitted_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Approval workflow
    approval_status = Column(String(20), default=APPROVAL_PENDING, nullable=False)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    __table_args__ = (
        # One attempt per learner per quiz
        UniqueConstraint("quiz_id", "user_id", name="uq_quiz_submission_quiz_user"),
        Index("idx_submissions_approval", "approval_status", "user_id"),
    )

    def __repr__(self):
        return f"<QuizSubmission(id={self.id}, quiz_id={self.quiz_id}, user_id={self.user_id}, score={self.score})>"


class QuizAnswer(Base):
    """
    One answered question of a submission.
    Question and option texts are copied at submission time; question_id and
    selected_option_id are kept as plain ids because quiz replacement deletes
    the rows they point to.
    """

    __tablename__ = "quiz_answers"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(
        Integer, ForeignKey("quiz_submissions.id"), nullable=False, index=True
    )

    question_id = Column(Integer, nullable=False)
    selected_option_id = Column(Integer, nullable=False)
    is_correct = Column(Boolean, nullable=False)

    question_text = Column(Text, nullable=True)
    selected_option_text = Column(Text, nullable=True)

    def __repr__(self):
        return f"<QuizAnswer(id={self.id}, submission_id={self.submission_id}, is_correct={self.is_correct})>"


class QuizSubmissionRejectionLog(Base):
    """Append-only audit trail; outlives the rejected submission."""

    __tablename__ = "quiz_submission_rejection_logs"

    id = Column(Integer, primary_key=True, index=True)

    submission_id = Column(Integer, nullable=False, index=True)
    staff_user_id = Column(Integer, nullable=False)
    employee_user_id = Column(Integer, nullable=False, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    quiz_id = Column(Integer, nullable=False)

    rejection_reason = Column(Text, nullable=False)
    rejected_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<QuizSubmissionRejectionLog(submission_id={self.submission_id}, employee_user_id={self.employee_user_id})>"

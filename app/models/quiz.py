# app/models/quiz.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from app.core.database import Base


class Quiz(Base):
    """
    Graded assessment attached to a course.
    At most one active quiz exists per course; replacing a quiz keeps its id.
    """

    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Settings
    passing_score = Column(Integer, default=60, nullable=False)  # percentage
    time_limit = Column(Integer, nullable=True)  # minutes
    show_results = Column(Boolean, default=True, nullable=False)
    show_correct_answers = Column(Boolean, default=True, nullable=False)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Quiz(id={self.id}, course_id={self.course_id}, title='{self.title}')>"


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)

    question = Column(Text, nullable=False)
    explanation = Column(Text, nullable=True)
    question_order = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("quiz_id", "question_order", name="uq_quiz_question_order"),
    )

    def __repr__(self):
        return f"<QuizQuestion(id={self.id}, quiz_id={self.quiz_id}, order={self.question_order})>"


class QuizOption(Base):
    __tablename__ = "quiz_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(
        Integer, ForeignKey("quiz_questions.id"), nullable=False, index=True
    )

    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    option_order = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<QuizOption(id={self.id}, question_id={self.question_id}, is_correct={self.is_correct})>"

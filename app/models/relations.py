# app/models/relations.py

from sqlalchemy.orm import relationship

# Import all relevant models
from .course import Course, CourseChapter, CourseModule
from .lesson_progress import LessonProgress
from .quiz import Quiz, QuizOption, QuizQuestion
from .quiz_submission import QuizAnswer, QuizSubmission
from .user import User


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Course Structure Relationships ---

    # 1. Course to Modules (One-to-Many)
    Course.modules = relationship(
        "CourseModule",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseModule.module_order",
    )
    CourseModule.course = relationship("Course", back_populates="modules")

    # 2. Module to Chapters (One-to-Many)
    CourseModule.chapters = relationship(
        "CourseChapter",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="CourseChapter.chapter_order",
    )
    CourseChapter.module = relationship("CourseModule", back_populates="chapters")

    # 3. User to LessonProgress (One-to-Many)
    User.lesson_progress = relationship(
        "LessonProgress",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    LessonProgress.user = relationship("User", back_populates="lesson_progress")
    LessonProgress.chapter = relationship("CourseChapter")

    # --- Quiz Relationships ---

    # 4. Course to Quizzes (One-to-Many, includes soft-deleted quizzes)
    Course.quizzes = relationship("Quiz", back_populates="course")
    Quiz.course = relationship("Course", back_populates="quizzes")

    # 5. Quiz to Questions (One-to-Many)
    Quiz.questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.question_order",
    )
    QuizQuestion.quiz = relationship("Quiz", back_populates="questions")

    # 6. Question to Options (One-to-Many)
    QuizQuestion.options = relationship(
        "QuizOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuizOption.option_order",
    )
    QuizOption.question = relationship("QuizQuestion", back_populates="options")

    # --- Submission Relationships ---

    # 7. Quiz to Submissions (One-to-Many)
    Quiz.submissions = relationship("QuizSubmission", back_populates="quiz")
    QuizSubmission.quiz = relationship("Quiz", back_populates="submissions")

    # 8. User to Submissions (One-to-Many) - as learner
    User.quiz_submissions = relationship(
        "QuizSubmission",
        back_populates="user",
        foreign_keys="QuizSubmission.user_id",
    )
    QuizSubmission.user = relationship(
        "User",
        back_populates="quiz_submissions",
        foreign_keys="QuizSubmission.user_id",
    )

    # 9. Submission to Answers (One-to-Many)
    QuizSubmission.answers = relationship(
        "QuizAnswer",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="QuizAnswer.id",
    )
    QuizAnswer.submission = relationship("QuizSubmission", back_populates="answers")

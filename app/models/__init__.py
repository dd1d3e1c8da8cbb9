"""
Models package initialization
Import all models and setup relationships
"""

from .course import Course, CourseChapter, CourseModule
from .lesson_progress import LessonProgress
from .quiz import Quiz, QuizOption, QuizQuestion
from .quiz_submission import QuizAnswer, QuizSubmission, QuizSubmissionRejectionLog

# Import and setup relationships
from .relations import setup_relationships
from .user import User

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Course",
    "CourseChapter",
    "CourseModule",
    "LessonProgress",
    "Quiz",
    "QuizAnswer",
    "QuizOption",
    "QuizQuestion",
    "QuizSubmission",
    "QuizSubmissionRejectionLog",
    "User",
]

# app/schemas/quiz.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# ==================== Authoring Schemas ====================


class QuizOptionCreate(BaseModel):
    text: str
    is_correct: bool = False


class QuizQuestionCreate(BaseModel):
    """Schema for a single quiz question - AUTHORING ONLY (includes correct answers)"""

    question: str
    explanation: Optional[str] = None
    options: List[QuizOptionCreate] = []


class QuizCreate(BaseModel):
    """
    Full quiz definition. Saving replaces any active quiz of the course.
    Title and questions are checked by the service so missing values
    surface as 400, not 422.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    passing_score: Optional[int] = Field(
        None, ge=0, le=100, description="Passing score percentage (default 60)"
    )
    time_limit: Optional[int] = Field(None, ge=1, description="Time limit in minutes")
    show_results: bool = True
    show_correct_answers: bool = True
    questions: List[QuizQuestionCreate] = []


class QuizSaveResponse(BaseModel):
    success: bool = True
    quiz_id: int


# ==================== Read Schemas ====================


class QuizOptionResponse(BaseModel):
    """is_correct is None when the viewer is a learner"""

    id: int
    text: str
    is_correct: Optional[bool] = None


class QuizQuestionResponse(BaseModel):
    id: int
    question: str
    explanation: Optional[str] = None
    options: List[QuizOptionResponse]


class QuizResponse(BaseModel):
    id: int
    course_id: int
    title: str
    description: Optional[str] = None
    passing_score: int
    time_limit: Optional[int] = None
    show_results: bool
    show_correct_answers: bool
    created_at: datetime
    updated_at: datetime
    questions: List[QuizQuestionResponse]


class QuizByCourseResponse(BaseModel):
    quiz: Optional[QuizResponse] = None
    message: Optional[str] = None


class QuizDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Quiz deleted"


class QuizDiagnosticIssue(BaseModel):
    type: str  # NO_CORRECT_ANSWER | MULTIPLE_CORRECT_ANSWERS
    question_id: int
    question: str
    message: str


class QuizDiagnosticsSummary(BaseModel):
    total_questions: int
    questions_without_correct_answer: int
    questions_with_multiple_correct_answers: int


class QuizDiagnosticsResponse(BaseModel):
    quiz_id: int
    has_issues: bool
    issues: List[QuizDiagnosticIssue]
    summary: QuizDiagnosticsSummary


# ==================== Eligibility Schemas ====================


class CanAttemptResponse(BaseModel):
    can_attempt: bool


class QuizAttemptCheckResponse(BaseModel):
    can_attempt: bool
    attempt_count: int
    message: str


# ==================== Submission Schemas ====================


class QuizAnswerSubmit(BaseModel):
    question_id: int
    selected_option_id: int


class QuizSubmitRequest(BaseModel):
    """Answers may be empty when the time limit expired before anything was answered"""

    answers: List[QuizAnswerSubmit]
    time_taken: int = Field(0, ge=0, description="Time taken in seconds")


class QuizSubmitResponse(BaseModel):
    success: bool = True
    submission_id: int
    score: float
    passed: bool
    correct_answers: int
    total_questions: int
    time_taken: int

# app/schemas/submission.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

# ==================== Learner Results ====================


class SubmissionAnswerResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_id: int
    question_text: Optional[str] = None
    selected_option_id: int
    selected_option_text: Optional[str] = None
    is_correct: bool
    correct_option_text: Optional[str] = None


class QuizResultsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quiz_id: int
    user_id: int
    score: float
    passed: bool
    total_questions: int
    correct_answers: int
    time_taken: int
    submitted_at: datetime
    attempt_number: int
    approval_status: str
    answers: Optional[List[SubmissionAnswerResult]] = None  # None when results are hidden


class QuizHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quiz_id: int
    score: float
    passed: bool
    submitted_at: datetime
    correct_answers: int
    total_questions: int
    attempt_number: int
    approval_status: str


class QuizHistoryResponse(BaseModel):
    history: List[QuizHistoryItem]


# ==================== Staff Listings ====================


class SubmissionSummary(BaseModel):
    submission_id: int
    quiz_id: int
    quiz_title: str
    course_id: int
    course_name: str
    passing_score: int
    user_id: int
    name: str
    first_name: str
    last_name: str
    email: str
    score: float
    passed: bool
    total_questions: int
    correct_answers: int
    time_taken: int
    submitted_at: datetime
    attempt_number: int
    approval_status: str


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionSummary]


class SubmissionDetailsResponse(SubmissionSummary):
    evaluation_status: str  # Pass | Fail
    answers: List[SubmissionAnswerResult]


# ==================== Full Review ====================


class ReviewOption(BaseModel):
    option_id: int
    option_text: str
    is_correct: bool


class StudentAnswer(BaseModel):
    selected_option_id: Optional[int] = None
    selected_option_text: Optional[str] = None
    is_correct: bool = False


class ReviewQuestion(BaseModel):
    question_id: int
    question_text: str
    explanation: Optional[str] = None
    options: List[ReviewOption]
    student_answer: StudentAnswer


class FullSubmissionHeader(BaseModel):
    id: int
    student_name: str
    student_email: str
    course_id: int
    course_name: str
    quiz_id: int
    quiz_title: str
    quiz_description: Optional[str] = None
    score: float
    total_questions: int
    correct_answers: int
    passed: bool
    passing_score: int
    time_taken: int
    submitted_at: datetime
    attempt_number: int
    approval_status: str
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class FullSubmissionDetailsResponse(BaseModel):
    submission: FullSubmissionHeader
    questions: List[ReviewQuestion]


# ==================== Approval Workflow ====================


class RejectSubmissionRequest(BaseModel):
    rejection_reason: Optional[str] = None


class ApprovalActionResponse(BaseModel):
    success: bool = True
    message: str
    submission_id: int
    quiz_id: Optional[int] = None
    user_id: Optional[int] = None
    course_id: Optional[int] = None

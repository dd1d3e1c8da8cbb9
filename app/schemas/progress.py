# app/schemas/progress.py
from pydantic import BaseModel


class LessonCompleteResponse(BaseModel):
    success: bool = True
    message: str = "Lesson marked as completed"
    chapter_id: int


class CourseProgressResponse(BaseModel):
    course_id: int
    total_chapters: int
    completed_chapters: int
    progress_percentage: float
    can_attempt_quiz: bool

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.progress import CourseProgressResponse, LessonCompleteResponse
from app.services.progress import ProgressService

router = APIRouter(prefix="/courses", tags=["progress"])


@router.post(
    "/{course_id}/chapters/{chapter_id}/complete",
    response_model=LessonCompleteResponse,
)
async def complete_lesson(
    course_id: int,
    chapter_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return ProgressService(db).complete_lesson(course_id, chapter_id, current_user.id)


@router.get("/{course_id}/progress", response_model=CourseProgressResponse)
async def get_course_progress(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return ProgressService(db).get_course_progress(course_id, current_user.id)

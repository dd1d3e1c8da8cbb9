# app/services/progress.py
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.decorator import db_exception
from app.core.exceptions import NotFoundError
from app.models.course import Course, CourseChapter, CourseModule
from app.models.lesson_progress import LessonProgress
from app.schemas.progress import CourseProgressResponse, LessonCompleteResponse

logger = logging.getLogger(__name__)


class ProgressService:
    """Lesson progress as far as the quiz engine reads or wipes it"""

    def __init__(self, db: Session):
        self.db = db

    def _course_chapter_ids(self):
        return select(CourseChapter.id).join(
            CourseModule, CourseChapter.module_id == CourseModule.id
        )

    def get_course_total_chapters(self, course_id: int) -> int:
        return (
            self.db.query(CourseChapter)
            .join(CourseModule, CourseChapter.module_id == CourseModule.id)
            .filter(CourseModule.course_id == course_id)
            .count()
        )

    def get_user_completed_chapter_count(self, course_id: int, user_id: int) -> int:
        return (
            self.db.query(LessonProgress)
            .join(CourseChapter, LessonProgress.chapter_id == CourseChapter.id)
            .join(CourseModule, CourseChapter.module_id == CourseModule.id)
            .filter(
                CourseModule.course_id == course_id,
                LessonProgress.user_id == user_id,
                LessonProgress.completed.is_(True),
            )
            .count()
        )

    def delete_lesson_progress(self, course_id: int, user_id: int) -> int:
        """
        Remove every LessonProgress row of the user for chapters of the course.
        Does not commit; runs inside the caller's transaction.
        """
        chapter_ids = self._course_chapter_ids().where(
            CourseModule.course_id == course_id
        )
        deleted = (
            self.db.query(LessonProgress)
            .filter(
                LessonProgress.user_id == user_id,
                LessonProgress.chapter_id.in_(chapter_ids),
            )
            .delete(synchronize_session=False)
        )
        logger.info(
            f"Deleted {deleted} lesson progress rows for user {user_id} in course {course_id}"
        )
        return deleted

    @db_exception
    def complete_lesson(
        self, course_id: int, chapter_id: int, user_id: int
    ) -> LessonCompleteResponse:
        """Mark a chapter as completed (upsert on user + chapter)"""
        chapter = (
            self.db.query(CourseChapter)
            .join(CourseModule, CourseChapter.module_id == CourseModule.id)
            .filter(CourseChapter.id == chapter_id, CourseModule.course_id == course_id)
            .first()
        )
        if not chapter:
            raise NotFoundError("Chapter not found in this course")

        now = datetime.now(timezone.utc)
        try:
            progress = (
                self.db.query(LessonProgress)
                .filter(
                    LessonProgress.user_id == user_id,
                    LessonProgress.chapter_id == chapter_id,
                )
                .first()
            )
            if progress:
                progress.completed = True
                progress.completed_at = now
            else:
                progress = LessonProgress(
                    user_id=user_id,
                    chapter_id=chapter_id,
                    completed=True,
                    completed_at=now,
                )
                self.db.add(progress)
            self.db.commit()
        except IntegrityError:
            # A concurrent request inserted the same row; it is already completed
            self.db.rollback()
            logger.warning(
                f"Lesson progress for user {user_id}, chapter {chapter_id} already recorded"
            )
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {user_id} completed chapter {chapter_id} of course {course_id}")
        return LessonCompleteResponse(chapter_id=chapter_id)

    def get_course_progress(self, course_id: int, user_id: int) -> CourseProgressResponse:
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise NotFoundError("Course not found")

        total = self.get_course_total_chapters(course_id)
        completed = self.get_user_completed_chapter_count(course_id, user_id)
        percentage = round(completed / total * 100, 2) if total else 0.0

        return CourseProgressResponse(
            course_id=course_id,
            total_chapters=total,
            completed_chapters=completed,
            progress_percentage=percentage,
            can_attempt_quiz=total > 0 and completed == total,
        )

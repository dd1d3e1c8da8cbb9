# app/models/lesson_progress.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from app.core.database import Base


class LessonProgress(Base):
    """
    Per-user completion state of a single course chapter (lesson).
    Read by quiz eligibility, wiped for a whole course when a quiz
    submission is rejected.
    """

    __tablename__ = "lesson_progress"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    chapter_id = Column(
        Integer, ForeignKey("course_chapters.id"), nullable=False, index=True
    )

    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "chapter_id", name="uq_lesson_progress_user_chapter"),
    )

    def __repr__(self):
        return f"<LessonProgress(user_id={self.user_id}, chapter_id={self.chapter_id}, completed={self.completed})>"

# app/models/course.py
from sqlalchemy import (
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


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Owner (instructor who authored the course)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

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
        return f"<Course(id={self.id}, title='{self.title}')>"


class CourseModule(Base):
    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    module_order = Column(Integer, default=1, nullable=False)

    def __repr__(self):
        return f"<CourseModule(id={self.id}, course_id={self.course_id})>"


class CourseChapter(Base):
    __tablename__ = "course_chapters"

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(
        Integer, ForeignKey("course_modules.id"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    chapter_order = Column(Integer, default=1, nullable=False)

    __table_args__ = (
        UniqueConstraint("module_id", "chapter_order", name="uq_chapter_order"),
    )

    def __repr__(self):
        return f"<CourseChapter(id={self.id}, module_id={self.module_id})>"

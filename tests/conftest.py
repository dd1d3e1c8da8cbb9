import os

# Must be set before anything from app/ is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "memory://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.core.hasher import PasswordHelper
from app.core.security import jwt_manager
from app.models import Course, CourseChapter, CourseModule, LessonProgress, User
from app.schemas.quiz import QuizCreate
from app.services.quiz import QuizService
from main import app

DEFAULT_PASSWORD = "Password@123"


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_database):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(setup_database):
    return TestClient(app)


# ==================== Factories ====================


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="employee", name=None, email=None, is_active=True):
        counter["n"] += 1
        user = User(
            name=name or f"Test {role.title()} {counter['n']}",
            email=email or f"{role}{counter['n']}@example.com",
            hashed_password=PasswordHelper.hash_password(DEFAULT_PASSWORD),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_course(db):
    def _make_course(created_by=None, chapters=2, title="Workplace Safety"):
        course = Course(title=title, created_by=created_by)
        module = CourseModule(title="Module 1", module_order=1)
        module.chapters = [
            CourseChapter(title=f"Chapter {i}", chapter_order=i)
            for i in range(1, chapters + 1)
        ]
        if chapters:
            course.modules = [module]
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make_course


def quiz_payload(num_questions=2, passing_score=60, **overrides):
    """Question i has options A/B/C with B correct"""
    payload = {
        "title": "Final Assessment",
        "description": "Course completion quiz",
        "passing_score": passing_score,
        "time_limit": 30,
        "questions": [
            {
                "question": f"Question {i}?",
                "explanation": f"Because of rule {i}",
                "options": [
                    {"text": f"Q{i} A", "is_correct": False},
                    {"text": f"Q{i} B", "is_correct": True},
                    {"text": f"Q{i} C", "is_correct": False},
                ],
            }
            for i in range(1, num_questions + 1)
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_quiz(db):
    """Create a quiz through the authoring service and return the active Quiz"""

    def _make_quiz(course, author, **kwargs):
        QuizService(db).save_quiz(
            course.id, QuizCreate(**quiz_payload(**kwargs)), created_by=author.id
        )
        return QuizService(db).get_active_quiz(course.id)

    return _make_quiz


def answer_key(quiz, correct=None):
    """
    Answers for every question of the quiz.
    correct: number of leading questions answered correctly (default all)
    """
    answers = []
    for index, question in enumerate(quiz.questions):
        right = correct is None or index < correct
        option = next(o for o in question.options if o.is_correct == right)
        answers.append({"question_id": question.id, "selected_option_id": option.id})
    return answers


def complete_course(db, course, user, chapters=None):
    """Mark the first `chapters` chapters of the course completed (default all)"""
    all_chapters = [c for m in course.modules for c in m.chapters]
    for chapter in all_chapters[: chapters if chapters is not None else len(all_chapters)]:
        db.add(LessonProgress(user_id=user.id, chapter_id=chapter.id, completed=True))
    db.commit()


def auth_headers(user):
    return {"Authorization": f"Bearer {jwt_manager.create_access_token(user)}"}

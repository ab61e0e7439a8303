"""
Pytest configuration and shared fixtures for testing.
"""
import os
from pathlib import Path

# Point the app at a throwaway SQLite file before anything imports app.database
_TEST_DB = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB}"

from typing import Iterable, List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.database.database import SessionLocal, engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.tests_models import (  # noqa: E402
    Base,
    DBQuestion,
    DBQuestionOption,
    DBTest,
    DBTestQuestion,
)

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Test client whose requests share the test database.
    """

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": USER_ID}


@pytest.fixture
def make_question(db_session):
    """Factory for catalog questions with lettered options."""

    def _make_question(
        correct: Iterable[str] = ("A",),
        subject_id: str = "physics",
        chapter_id: str = "kinematics",
        labels: str = "ABCD",
    ) -> DBQuestion:
        correct = set(correct)
        question = DBQuestion(
            subject_id=subject_id,
            chapter_id=chapter_id,
            question_text=f"Question on {chapter_id}",
            options=[
                DBQuestionOption(
                    option_label=label,
                    option_text=f"Option {label}",
                    is_correct=label in correct,
                    display_order=index,
                )
                for index, label in enumerate(labels)
            ],
        )
        db_session.add(question)
        db_session.commit()
        return question

    return _make_question


@pytest.fixture
def make_test(db_session):
    """Factory for a test built from the given questions, in order."""

    def _make_test(
        questions: List[DBQuestion],
        marking_scheme: Optional[dict] = None,
        total_marks: Optional[float] = None,
        marks_per_question: float = 4,
        is_active: bool = True,
    ) -> DBTest:
        test = DBTest(
            title="Mock test",
            total_questions=len(questions),
            total_marks=total_marks if total_marks is not None else marks_per_question * len(questions),
            duration_minutes=2 * len(questions),
            marking_scheme=marking_scheme,
            is_active=is_active,
            test_questions=[
                DBTestQuestion(question_id=q.id, question_number=index + 1, marks=marks_per_question)
                for index, q in enumerate(questions)
            ],
        )
        db_session.add(test)
        db_session.commit()
        return test

    return _make_test


@pytest.fixture
def scheme():
    return {"correct": 4, "incorrect": -1, "unattempted": 0}

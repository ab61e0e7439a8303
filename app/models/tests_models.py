# app/models/tests_models.py
import uuid
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

from ..core.datetime_utils import utc_now

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class DBQuestion(Base):
    """Catalog question. Owned by the catalog service; read-only here."""

    __tablename__ = "questions"

    id = Column(String, primary_key=True, default=_new_id)
    subject_id = Column(String, nullable=False, index=True)
    chapter_id = Column(String, nullable=False, index=True)
    question_text = Column(String, nullable=False)

    options = relationship(
        "DBQuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="DBQuestionOption.display_order",
    )


class DBQuestionOption(Base):
    __tablename__ = "question_options"

    id = Column(String, primary_key=True, default=_new_id)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False, index=True)
    option_label = Column(String, nullable=False)
    option_text = Column(String, nullable=True)
    is_correct = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)

    question = relationship("DBQuestion", back_populates="options")


class DBTest(Base):
    __tablename__ = "tests"

    id = Column(String, primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    total_questions = Column(Integer, nullable=False)
    total_marks = Column(Float, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    marking_scheme = Column(JSON, nullable=True)  # {"correct": 4, "incorrect": -1, "unattempted": 0}
    is_active = Column(Boolean, nullable=False, default=True)

    # Recomputed whenever an attempt is finished
    attempt_count = Column(Integer, nullable=False, default=0)
    average_score = Column(Float, nullable=True)
    highest_score = Column(Float, nullable=True)

    test_questions = relationship(
        "DBTestQuestion",
        back_populates="test",
        cascade="all, delete-orphan",
        order_by="DBTestQuestion.question_number",
    )


class DBTestQuestion(Base):
    __tablename__ = "test_questions"
    __table_args__ = (UniqueConstraint("test_id", "question_id", name="uq_test_question"),)

    id = Column(String, primary_key=True, default=_new_id)
    test_id = Column(String, ForeignKey("tests.id"), nullable=False, index=True)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False)
    question_number = Column(Integer, nullable=False)
    marks = Column(Float, nullable=False, default=4)

    test = relationship("DBTest", back_populates="test_questions")
    question = relationship("DBQuestion")


class DBTestAttempt(Base):
    __tablename__ = "test_attempts"
    __table_args__ = (
        UniqueConstraint("test_id", "user_id", "attempt_number", name="uq_attempt_number"),
        # One open attempt per (user, test)
        Index(
            "uq_active_attempt",
            "test_id",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'in_progress'"),
            postgresql_where=text("status = 'in_progress'"),
        ),
    )

    id = Column(String, primary_key=True, default=_new_id)
    test_id = Column(String, ForeignKey("tests.id"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=AttemptStatus.IN_PROGRESS.value)
    started_at = Column(DateTime, nullable=False, default=utc_now)
    submitted_at = Column(DateTime, nullable=True)

    # Snapshot of the test at start time
    total_questions = Column(Integer, nullable=False)
    total_marks = Column(Float, nullable=False)

    # Written only by finish
    time_taken_seconds = Column(Integer, nullable=True)
    attempted_questions = Column(Integer, nullable=True)
    correct_answers = Column(Integer, nullable=True)
    incorrect_answers = Column(Integer, nullable=True)
    skipped_questions = Column(Integer, nullable=True)
    marks_obtained = Column(Float, nullable=True)
    percentage = Column(Float, nullable=True)
    subject_wise_scores = Column(JSON, nullable=True)
    chapter_wise_scores = Column(JSON, nullable=True)
    time_distribution = Column(JSON, nullable=True)

    test = relationship("DBTest")
    answer_responses = relationship(
        "DBAnswerResponse",
        back_populates="attempt",
        cascade="all, delete-orphan",
    )


class DBAnswerResponse(Base):
    __tablename__ = "answer_responses"
    __table_args__ = (UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question"),)

    id = Column(String, primary_key=True, default=_new_id)
    attempt_id = Column(String, ForeignKey("test_attempts.id"), nullable=False, index=True)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False)
    selected_options = Column(JSON, nullable=False, default=list)
    numerical_answer = Column(Float, nullable=True)
    is_attempted = Column(Boolean, nullable=False, default=False)
    is_correct = Column(Boolean, nullable=True)
    marks_obtained = Column(Float, nullable=False, default=0)
    time_spent_seconds = Column(Integer, nullable=False, default=0)
    marked_for_review = Column(Boolean, nullable=False, default=False)
    answered_at = Column(DateTime, nullable=False, default=utc_now)

    attempt = relationship("DBTestAttempt", back_populates="answer_responses")

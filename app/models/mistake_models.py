# app/models/mistake_models.py
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..core.config import DEFAULT_EASE_FACTOR
from ..core.datetime_utils import utc_now
from .tests_models import Base, _new_id


class DBMistake(Base):
    __tablename__ = "mistakes"
    __table_args__ = (UniqueConstraint("user_id", "question_id", name="uq_user_question"),)

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False)

    # Where the miss came from, e.g. ("test_attempt", <attempt id>)
    source_type = Column(String, nullable=True)
    source_id = Column(String, nullable=True)

    user_answer = Column(JSON, nullable=False, default=list)
    user_answer_text = Column(String, nullable=True)
    correct_answer = Column(JSON, nullable=False, default=list)

    user_notes = Column(String, nullable=True)
    mistake_reason = Column(String, nullable=True)
    concept_gap = Column(String, nullable=True)
    mistake_type = Column(String, nullable=True)
    severity = Column(String, nullable=True)

    # SM-2 state
    ease_factor = Column(Float, nullable=False, default=DEFAULT_EASE_FACTOR)
    interval_days = Column(Integer, nullable=False, default=0)
    repetition = Column(Integer, nullable=False, default=0)
    revision_count = Column(Integer, nullable=False, default=0)
    last_revised_at = Column(DateTime, nullable=True)
    next_revision_date = Column(DateTime, nullable=True)
    is_mastered = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    question = relationship("DBQuestion")

    @property
    def subject_id(self):
        return self.question.subject_id if self.question else None

    @property
    def chapter_id(self):
        return self.question.chapter_id if self.question else None

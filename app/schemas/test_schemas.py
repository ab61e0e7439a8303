# app/schemas/test_schemas.py
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.config import (
    DEFAULT_CORRECT_MARKS,
    DEFAULT_INCORRECT_MARKS,
    DEFAULT_UNATTEMPTED_MARKS,
)

# subject/chapter id -> marks, subject id -> seconds
ScoreMap = Dict[str, float]
TimeMap = Dict[str, int]


class AnswerOutcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNATTEMPTED = "unattempted"


class MarkingScheme(BaseModel):
    correct: float = DEFAULT_CORRECT_MARKS
    incorrect: float = DEFAULT_INCORRECT_MARKS
    unattempted: float = DEFAULT_UNATTEMPTED_MARKS

    @classmethod
    def from_json(cls, raw: Optional[dict]) -> "MarkingScheme":
        """Build from the JSON stored on a test; missing or null keys fall back to defaults."""
        return cls.model_validate({key: value for key, value in (raw or {}).items() if value is not None})

    def to_json(self) -> dict:
        return self.model_dump()

    def marks_for(self, outcome: AnswerOutcome) -> float:
        return getattr(self, outcome.value)


class Evaluation(BaseModel):
    attempted: bool
    is_correct: Optional[bool] = None
    marks: float


class ResultSummary(BaseModel):
    attempted_questions: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    skipped_questions: int = 0
    marks_obtained: float = 0
    percentage: float = 0
    time_taken_seconds: int = 0
    subject_wise_scores: ScoreMap = Field(default_factory=dict)
    chapter_wise_scores: ScoreMap = Field(default_factory=dict)
    time_distribution: TimeMap = Field(default_factory=dict)


class AnswerSubmission(BaseModel):
    selected_options: List[str] = Field(default_factory=list)
    numerical_answer: Optional[float] = None
    time_spent_seconds: int = Field(default=0, ge=0)
    marked_for_review: bool = False

    @field_validator('selected_options')
    def normalize_labels(cls, v):
        # Strip whitespace and drop duplicates, keeping first-seen order
        labels = []
        for label in v:
            label = str(label).strip()
            if label and label not in labels:
                labels.append(label)
        return labels


class AnswerResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    attempt_id: str
    question_id: str
    selected_options: List[str]
    numerical_answer: Optional[float] = None
    is_attempted: bool
    is_correct: Optional[bool] = None
    marks_obtained: float
    time_spent_seconds: int
    marked_for_review: bool
    answered_at: datetime


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    test_id: str
    user_id: str
    attempt_number: int
    status: str
    started_at: datetime
    submitted_at: Optional[datetime] = None
    total_questions: int
    total_marks: float
    time_taken_seconds: Optional[int] = None
    attempted_questions: Optional[int] = None
    correct_answers: Optional[int] = None
    incorrect_answers: Optional[int] = None
    skipped_questions: Optional[int] = None
    marks_obtained: Optional[float] = None
    percentage: Optional[float] = None
    subject_wise_scores: Optional[ScoreMap] = None
    chapter_wise_scores: Optional[ScoreMap] = None
    time_distribution: Optional[TimeMap] = None


class TestQuestionOut(BaseModel):
    question_id: str
    question_number: int
    marks: float
    subject_id: str
    chapter_id: str


class TestOut(BaseModel):
    id: str
    title: str
    total_questions: int
    total_marks: float
    duration_minutes: int
    marking_scheme: MarkingScheme
    test_questions: List[TestQuestionOut]


class AttemptResults(AttemptOut):
    answer_responses: List[AnswerResponseOut]
    test: TestOut


class AttemptHistory(BaseModel):
    data: List[AttemptOut]
    total: int
    page: int
    limit: int
    total_pages: int

# app/schemas/mistake_schemas.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class MistakeMetadata(BaseModel):
    source_type: Optional[str] = None
    source_id: Optional[str] = None
    user_answer_text: Optional[str] = None
    user_notes: Optional[str] = None
    mistake_reason: Optional[str] = None
    concept_gap: Optional[str] = None
    mistake_type: Optional[str] = None
    severity: Optional[str] = None


class MistakeCreate(MistakeMetadata):
    question_id: str
    user_answer: List[str] = Field(default_factory=list)
    correct_answer: List[str] = Field(default_factory=list)


class ReviewState(BaseModel):
    """SM-2 scheduling state of a single ledger entry."""

    ease_factor: float
    interval_days: int
    repetition: int
    next_revision_date: Optional[datetime] = None
    is_mastered: bool = False


class MistakeOut(MistakeMetadata):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    question_id: str
    user_answer: List[str]
    correct_answer: List[str]
    ease_factor: float
    interval_days: int
    repetition: int
    revision_count: int
    last_revised_at: Optional[datetime] = None
    next_revision_date: Optional[datetime] = None
    is_mastered: bool
    created_at: datetime
    updated_at: datetime


class RevisionQueueEntry(MistakeOut):
    subject_id: Optional[str] = None
    chapter_id: Optional[str] = None


class MistakeFilter(BaseModel):
    question_id: Optional[str] = None
    subject_id: Optional[str] = None
    chapter_id: Optional[str] = None
    mistake_type: Optional[str] = None
    severity: Optional[str] = None
    is_mastered: Optional[bool] = None
    source_type: Optional[str] = None


class MistakePage(BaseModel):
    data: List[MistakeOut]
    total: int
    page: int
    limit: int
    total_pages: int


class NotesUpdate(BaseModel):
    user_notes: str


class RevisionRating(BaseModel):
    # 0-5, range checked by the scheduler; bools, floats and strings are rejected
    quality: StrictInt


class RevisionItem(BaseModel):
    question_id: str
    quality: StrictInt


class RevisionSessionRequest(BaseModel):
    revisions: List[RevisionItem]


class RevisionItemResult(BaseModel):
    question_id: str
    success: bool
    is_mastered: Optional[bool] = None
    error: Optional[str] = None


class RevisionSessionResult(BaseModel):
    total: int
    successful: int
    results: List[RevisionItemResult]


class MistakeStats(BaseModel):
    total: int
    mastered: int
    pending: int
    by_type: Dict[str, int]
    by_severity: Dict[str, int]
    by_subject: Dict[str, int]


class MistakeSummary(MistakeStats):
    revision_queue_count: int
    upcoming_revisions: List[RevisionQueueEntry]

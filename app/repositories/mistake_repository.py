# app/repositories/mistake_repository.py
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ..core.config import DEFAULT_EASE_FACTOR
from ..models.mistake_models import DBMistake
from ..models.tests_models import DBQuestion
from ..schemas.mistake_schemas import MistakeFilter, ReviewState

# State a ledger entry starts from, and returns to when the question is missed again
INITIAL_REVIEW_STATE = {
    "ease_factor": DEFAULT_EASE_FACTOR,
    "interval_days": 0,
    "repetition": 0,
    "revision_count": 0,
    "last_revised_at": None,
    "next_revision_date": None,
    "is_mastered": False,
}


class MistakeRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str, question_id: str) -> Optional[DBMistake]:
        return (
            self.db.query(DBMistake)
            .filter(DBMistake.user_id == user_id, DBMistake.question_id == question_id)
            .first()
        )

    def exists(self, user_id: str, question_id: str) -> bool:
        return (
            self.db.query(func.count(DBMistake.id))
            .filter(DBMistake.user_id == user_id, DBMistake.question_id == question_id)
            .scalar()
            > 0
        )

    def upsert(self, user_id: str, question_id: str, values: dict) -> Tuple[DBMistake, bool]:
        """
        Insert the entry for (user, question) or fully replace the existing one.

        Every field not supplied in `values` is reset, including the review state,
        so a repeated miss starts the review clock over. Returns (entry, created).
        """
        mistake = self.get(user_id, question_id)
        created = mistake is None
        if created:
            mistake = DBMistake(user_id=user_id, question_id=question_id)
            self.db.add(mistake)

        fields = {
            "source_type": None,
            "source_id": None,
            "user_answer": [],
            "user_answer_text": None,
            "correct_answer": [],
            "user_notes": None,
            "mistake_reason": None,
            "concept_gap": None,
            "mistake_type": None,
            "severity": None,
            **INITIAL_REVIEW_STATE,
        }
        fields.update(values)
        for key, value in fields.items():
            setattr(mistake, key, value)
        self.db.flush()
        return mistake, created

    def delete(self, mistake: DBMistake) -> None:
        self.db.delete(mistake)
        self.db.flush()

    def save_review(self, mistake: DBMistake, state: ReviewState, revised_at: datetime) -> DBMistake:
        mistake.ease_factor = state.ease_factor
        mistake.interval_days = state.interval_days
        mistake.repetition = state.repetition
        mistake.next_revision_date = state.next_revision_date
        mistake.is_mastered = state.is_mastered
        mistake.last_revised_at = revised_at
        mistake.revision_count = (mistake.revision_count or 0) + 1
        self.db.flush()
        return mistake

    def update_notes(self, mistake: DBMistake, notes: str) -> DBMistake:
        mistake.user_notes = notes
        self.db.flush()
        return mistake

    def list_for_user(
        self, user_id: str, filters: MistakeFilter, page: int = 1, limit: int = 20
    ) -> Tuple[List[DBMistake], int]:
        query = self.db.query(DBMistake).filter(DBMistake.user_id == user_id)
        if filters.subject_id or filters.chapter_id:
            query = query.join(DBQuestion, DBMistake.question_id == DBQuestion.id)
            if filters.subject_id:
                query = query.filter(DBQuestion.subject_id == filters.subject_id)
            if filters.chapter_id:
                query = query.filter(DBQuestion.chapter_id == filters.chapter_id)
        if filters.question_id:
            query = query.filter(DBMistake.question_id == filters.question_id)
        if filters.mistake_type:
            query = query.filter(DBMistake.mistake_type == filters.mistake_type)
        if filters.severity:
            query = query.filter(DBMistake.severity == filters.severity)
        if filters.is_mastered is not None:
            query = query.filter(DBMistake.is_mastered == filters.is_mastered)
        if filters.source_type:
            query = query.filter(DBMistake.source_type == filters.source_type)

        total = query.count()
        rows = (
            query.order_by(DBMistake.created_at.desc(), DBMistake.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total

    def revision_queue(self, user_id: str, now: datetime, limit: Optional[int] = None) -> List[DBMistake]:
        """Non-mastered entries that are due, never-scheduled ones first, then oldest due, then oldest added."""
        query = (
            self.db.query(DBMistake)
            .options(selectinload(DBMistake.question))
            .filter(
                DBMistake.user_id == user_id,
                DBMistake.is_mastered.is_(False),
                or_(DBMistake.next_revision_date.is_(None), DBMistake.next_revision_date <= now),
            )
            .order_by(
                DBMistake.next_revision_date.asc().nulls_first(),
                DBMistake.created_at.asc(),
                DBMistake.id,
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_by(self, user_id: str, column) -> Dict[str, int]:
        rows = (
            self.db.query(column, func.count(DBMistake.id))
            .filter(DBMistake.user_id == user_id, column.isnot(None))
            .group_by(column)
            .all()
        )
        return {key: count for key, count in rows}

    def stats(self, user_id: str) -> dict:
        total = self.db.query(func.count(DBMistake.id)).filter(DBMistake.user_id == user_id).scalar()
        mastered = (
            self.db.query(func.count(DBMistake.id))
            .filter(DBMistake.user_id == user_id, DBMistake.is_mastered.is_(True))
            .scalar()
        )
        by_subject = (
            self.db.query(DBQuestion.subject_id, func.count(DBMistake.id))
            .join(DBQuestion, DBMistake.question_id == DBQuestion.id)
            .filter(DBMistake.user_id == user_id)
            .group_by(DBQuestion.subject_id)
            .all()
        )
        return {
            "total": total,
            "mastered": mastered,
            "pending": total - mastered,
            "by_type": self.count_by(user_id, DBMistake.mistake_type),
            "by_severity": self.count_by(user_id, DBMistake.severity),
            "by_subject": {subject_id: count for subject_id, count in by_subject},
        }

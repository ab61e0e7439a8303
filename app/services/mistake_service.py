# app/services/mistake_service.py
from typing import List, Optional, Sequence
import logging
from sqlalchemy.orm import Session
from ..core.datetime_utils import utc_now
from ..core.errors import AssessmentError, NotFoundError, ValidationError
from ..models.mistake_models import DBMistake
from ..repositories.mistake_repository import MistakeRepository
from ..repositories.test_repository import QuestionRepository, total_pages
from ..schemas.mistake_schemas import (
    MistakeCreate,
    MistakeFilter,
    MistakeOut,
    MistakePage,
    MistakeStats,
    MistakeSummary,
    ReviewState,
    RevisionQueueEntry,
    RevisionItem,
    RevisionItemResult,
    RevisionSessionResult,
)
from .spaced_repetition import schedule_review, validate_quality

logger = logging.getLogger(__name__)


class MistakeService:
    """Per-user mistake notebook and its spaced-repetition review queue."""

    def __init__(self, db: Session):
        self.db = db
        self.mistakes = MistakeRepository(db)
        self.questions = QuestionRepository(db)

    def _get_mistake(self, user_id: str, question_id: str) -> DBMistake:
        mistake = self.mistakes.get(user_id, question_id)
        if not mistake:
            raise NotFoundError("Mistake not found in notebook")
        return mistake

    def add(self, user_id: str, data: MistakeCreate) -> DBMistake:
        """
        Add a question to the user's notebook.

        Adding a question that is already in the notebook replaces the entry and
        resets its review schedule, including mastery.
        """
        if not self.questions.get(data.question_id):
            raise NotFoundError("Question not found")

        try:
            mistake, created = self.mistakes.upsert(
                user_id, data.question_id, data.model_dump(exclude={"question_id"})
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if created:
            logger.info(f"Added question {data.question_id} to mistake notebook of user {user_id}")
        else:
            logger.info(f"Reset review schedule of question {data.question_id} for user {user_id}")
        return mistake

    def remove(self, user_id: str, question_id: str) -> None:
        mistake = self._get_mistake(user_id, question_id)
        try:
            self.mistakes.delete(mistake)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Removed question {question_id} from mistake notebook of user {user_id}")

    def get_mistake(self, user_id: str, question_id: str) -> DBMistake:
        return self._get_mistake(user_id, question_id)

    def is_in_mistake_notebook(self, user_id: str, question_id: str) -> bool:
        return self.mistakes.exists(user_id, question_id)

    def get_user_mistakes(
        self,
        user_id: str,
        filters: Optional[MistakeFilter] = None,
        page: int = 1,
        limit: int = 20,
    ) -> MistakePage:
        if page < 1:
            raise ValidationError("Page must be at least 1", field="page")
        if limit < 1:
            raise ValidationError("Limit must be at least 1", field="limit")

        rows, total = self.mistakes.list_for_user(user_id, filters or MistakeFilter(), page, limit)
        return MistakePage(
            data=[MistakeOut.model_validate(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )

    def update_notes(self, user_id: str, question_id: str, notes: str) -> DBMistake:
        mistake = self._get_mistake(user_id, question_id)
        try:
            self.mistakes.update_notes(mistake, notes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return mistake

    def update_revision_status(self, user_id: str, question_id: str, quality: int) -> DBMistake:
        """Apply one SM-2 review with a 0-5 quality rating and reschedule the entry."""
        validate_quality(quality)
        mistake = self._get_mistake(user_id, question_id)

        now = utc_now()
        current = ReviewState(
            ease_factor=mistake.ease_factor,
            interval_days=mistake.interval_days,
            repetition=mistake.repetition,
            next_revision_date=mistake.next_revision_date,
            is_mastered=mistake.is_mastered,
        )
        state = schedule_review(current, quality, now)

        try:
            self.mistakes.save_review(mistake, state, now)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Reviewed question {question_id} for user {user_id} with quality {quality}: "
            f"next in {state.interval_days}d, ease {state.ease_factor:.2f}, mastered={state.is_mastered}"
        )
        return mistake

    def get_revision_queue(self, user_id: str, limit: Optional[int] = None) -> List[DBMistake]:
        """Due, non-mastered entries: never-scheduled first, then most overdue, then oldest added."""
        if limit is not None and limit < 1:
            raise ValidationError("Limit must be at least 1", field="limit")
        return self.mistakes.revision_queue(user_id, utc_now(), limit)

    def start_revision_session(self, user_id: str, count: int = 10) -> List[DBMistake]:
        return self.get_revision_queue(user_id, count)

    def complete_revision_session(
        self, user_id: str, revisions: Sequence[RevisionItem]
    ) -> RevisionSessionResult:
        """Apply each rating on its own; a failed item is reported and the rest still apply."""
        results = []
        for revision in revisions:
            try:
                updated = self.update_revision_status(user_id, revision.question_id, revision.quality)
                results.append(
                    RevisionItemResult(
                        question_id=revision.question_id,
                        success=True,
                        is_mastered=updated.is_mastered,
                    )
                )
            except AssessmentError as e:
                results.append(
                    RevisionItemResult(question_id=revision.question_id, success=False, error=e.message)
                )

        successful = sum(1 for result in results if result.success)
        logger.info(f"Revision session for user {user_id}: {successful}/{len(revisions)} reviews applied")
        return RevisionSessionResult(total=len(revisions), successful=successful, results=results)

    def get_mistake_stats(self, user_id: str) -> MistakeStats:
        return MistakeStats(**self.mistakes.stats(user_id))

    def get_mistake_summary(self, user_id: str) -> MistakeSummary:
        stats = self.get_mistake_stats(user_id)
        queue = self.get_revision_queue(user_id)
        return MistakeSummary(
            **stats.model_dump(),
            revision_queue_count=len(queue),
            upcoming_revisions=[RevisionQueueEntry.model_validate(m) for m in queue[:5]],
        )

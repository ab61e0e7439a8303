# app/routers/mistake_router.py
from fastapi import APIRouter, HTTPException, Depends, Response
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from ..core.config import REVISION_QUEUE_DEFAULT_LIMIT
from ..core.errors import AssessmentError
from ..schemas.mistake_schemas import (
    MistakeCreate,
    MistakeFilter,
    MistakeOut,
    MistakePage,
    MistakeStats,
    MistakeSummary,
    NotesUpdate,
    RevisionQueueEntry,
    RevisionRating,
    RevisionSessionRequest,
    RevisionSessionResult,
)
from ..services.mistake_service import MistakeService
from ..database.database import get_db
from .dependencies import get_current_user_id, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mistakes", tags=["mistakes"])


@router.post("", response_model=MistakeOut)
def add_mistake(
    data: MistakeCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Add a question to the notebook. Re-adding restarts its review schedule."""
    try:
        return MistakeService(db).add(user_id, data)
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error adding mistake: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to add mistake")


@router.get("", response_model=MistakePage)
def list_mistakes(
    question_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    chapter_id: Optional[str] = None,
    mistake_type: Optional[str] = None,
    severity: Optional[str] = None,
    is_mastered: Optional[bool] = None,
    source_type: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    filters = MistakeFilter(
        question_id=question_id,
        subject_id=subject_id,
        chapter_id=chapter_id,
        mistake_type=mistake_type,
        severity=severity,
        is_mastered=is_mastered,
        source_type=source_type,
    )
    try:
        return MistakeService(db).get_user_mistakes(user_id, filters, page, limit)
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error listing mistakes: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to list mistakes")


@router.get("/revision-queue", response_model=List[RevisionQueueEntry])
def get_revision_queue(
    limit: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Entries due for review, most overdue first."""
    try:
        return MistakeService(db).get_revision_queue(
            user_id, limit if limit is not None else REVISION_QUEUE_DEFAULT_LIMIT
        )
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error retrieving revision queue: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve revision queue")


@router.post("/revision-session", response_model=RevisionSessionResult)
def complete_revision_session(
    request: RevisionSessionRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Apply a batch of review ratings; each item succeeds or fails on its own."""
    try:
        return MistakeService(db).complete_revision_session(user_id, request.revisions)
    except Exception as e:
        logger.error(f"Error completing revision session: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to complete revision session")


@router.get("/stats", response_model=MistakeStats)
def get_mistake_stats(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MistakeService(db).get_mistake_stats(user_id)
    except Exception as e:
        logger.error(f"Error retrieving mistake stats: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve mistake stats")


@router.get("/summary", response_model=MistakeSummary)
def get_mistake_summary(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MistakeService(db).get_mistake_summary(user_id)
    except Exception as e:
        logger.error(f"Error retrieving mistake summary: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve mistake summary")


@router.get("/{question_id}", response_model=MistakeOut)
def get_mistake(
    question_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MistakeService(db).get_mistake(user_id, question_id)
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error retrieving mistake: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve mistake")


@router.delete("/{question_id}", status_code=204)
def remove_mistake(
    question_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        MistakeService(db).remove(user_id, question_id)
        return Response(status_code=204)
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error removing mistake: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to remove mistake")


@router.patch("/{question_id}/notes", response_model=MistakeOut)
def update_notes(
    question_id: str,
    data: NotesUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MistakeService(db).update_notes(user_id, question_id, data.user_notes)
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating notes: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update notes")


@router.post("/{question_id}/revision", response_model=MistakeOut)
def update_revision_status(
    question_id: str,
    rating: RevisionRating,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Record one review of the entry with a 0-5 quality rating."""
    try:
        return MistakeService(db).update_revision_status(user_id, question_id, rating.quality)
    except AssessmentError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating revision status: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update revision status")

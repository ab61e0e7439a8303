# app/services/result_aggregator.py
from typing import Dict, Iterable, Optional

from ..models.tests_models import DBAnswerResponse, DBTestQuestion
from ..schemas.test_schemas import ResultSummary


def _add(bucket: Dict[str, float], key: str, amount: float) -> None:
    bucket[key] = bucket.get(key, 0) + amount


def aggregate_results(
    test_questions: Iterable[DBTestQuestion],
    responses: Iterable[DBAnswerResponse],
    total_questions: int,
    total_marks: Optional[float],
) -> ResultSummary:
    """
    Fold an attempt's stored responses into its result summary.

    Only responses to questions that belong to the test are counted. Marks are
    the deltas stored at submission time, so negative marking carries through.
    Questions with no attempted response are skipped and appear in no score map.
    """
    by_question = {response.question_id: response for response in responses}
    summary = ResultSummary()

    for test_question in test_questions:
        response = by_question.get(test_question.question_id)
        if response is None:
            continue

        question = test_question.question
        marks = response.marks_obtained or 0
        seconds = response.time_spent_seconds or 0

        summary.marks_obtained += marks
        summary.time_taken_seconds += seconds
        _add(summary.time_distribution, question.subject_id, seconds)

        if not response.is_attempted:
            continue

        summary.attempted_questions += 1
        if response.is_correct:
            summary.correct_answers += 1
        else:
            summary.incorrect_answers += 1

        _add(summary.subject_wise_scores, question.subject_id, marks)
        _add(summary.chapter_wise_scores, question.chapter_id, marks)

    summary.skipped_questions = total_questions - summary.attempted_questions
    summary.percentage = (summary.marks_obtained / total_marks * 100) if total_marks else 0
    return summary

# app/services/answer_evaluator.py
from typing import Iterable, Set

from ..models.tests_models import DBQuestion
from ..schemas.test_schemas import AnswerOutcome, Evaluation, MarkingScheme


def correct_option_labels(question: DBQuestion) -> Set[str]:
    return {option.option_label for option in question.options if option.is_correct}


def evaluate_answer(
    correct_options: Iterable[str],
    selected_options: Iterable[str],
    scheme: MarkingScheme,
) -> Evaluation:
    """
    Score one submitted selection against the question's correct options.

    A selection is correct only when it equals the correct set exactly, so a
    strict subset or superset is incorrect for single- and multi-correct
    questions alike. An empty selection is unattempted and has no correctness.
    """
    selected = set(selected_options)
    if not selected:
        return Evaluation(
            attempted=False,
            is_correct=None,
            marks=scheme.marks_for(AnswerOutcome.UNATTEMPTED),
        )

    is_correct = selected == set(correct_options)
    outcome = AnswerOutcome.CORRECT if is_correct else AnswerOutcome.INCORRECT
    return Evaluation(attempted=True, is_correct=is_correct, marks=scheme.marks_for(outcome))

"""
Per-type checks on the free-form question documents.

Options and answers are stored as schema-free JSON; only the keys a
question type relies on are checked here:

    SINGLE_CHOICE / MULTIPLE_CHOICE   options.choices: non-empty list
    SCALE                             options.min < options.max when both given
    answers                           response_data.answer
"""
from datetime import date, time
from typing import Any, List, Optional

from app.core.exceptions import InvalidResponseData, ValidationFailed
from app.models.question import CHOICE_TYPES, Question, QuestionType


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def choice_values(options: Optional[dict]) -> List[Any]:
    """Values of the choices; a choice is a plain value or {"value": ..., "label": ...}."""
    choices = (options or {}).get("choices") or []
    return [choice.get("value") if isinstance(choice, dict) else choice for choice in choices]


def validate_options(question_type: QuestionType, options: Optional[dict]) -> None:
    """
    Raises:
        ValidationFailed: If the options cannot serve the question type
    """
    options = options or {}
    if question_type in CHOICE_TYPES:
        choices = options.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ValidationFailed(f"{question_type.value} questions need a non-empty 'choices' list")
    elif question_type == QuestionType.SCALE:
        low, high = options.get("min"), options.get("max")
        if low is not None or high is not None:
            if not (_is_number(low) and _is_number(high)) or low >= high:
                raise ValidationFailed("SCALE options need numeric 'min' lower than 'max'")


def validate_answer(question: Question, response_data: dict, other_response: Optional[str] = None) -> None:
    """
    Raises:
        InvalidResponseData: If the answer does not fit the question
    """
    answer = response_data.get("answer")
    if answer is None:
        if question.is_required and not other_response:
            raise InvalidResponseData("An answer is required for this question")
        return

    question_type = question.question_type
    options = question.options or {}

    if question_type == QuestionType.SINGLE_CHOICE:
        _check_choice(question, answer, choice_values(options), other_response)
    elif question_type == QuestionType.MULTIPLE_CHOICE:
        if not isinstance(answer, list):
            raise InvalidResponseData("MULTIPLE_CHOICE answers must be a list")
        values = choice_values(options)
        for item in answer:
            _check_choice(question, item, values, other_response)
    elif question_type == QuestionType.YES_NO:
        if not isinstance(answer, bool):
            raise InvalidResponseData("YES_NO answers must be true or false")
    elif question_type == QuestionType.SCALE:
        if not _is_number(answer):
            raise InvalidResponseData("SCALE answers must be a number")
        low, high = options.get("min"), options.get("max")
        if (_is_number(low) and answer < low) or (_is_number(high) and answer > high):
            raise InvalidResponseData(f"SCALE answer must be between {low} and {high}")
    elif question_type == QuestionType.DATE:
        _check_iso(answer, date.fromisoformat, "DATE answers must be YYYY-MM-DD")
    elif question_type == QuestionType.TIME:
        _check_iso(answer, time.fromisoformat, "TIME answers must be HH:MM")
    elif not isinstance(answer, str):
        raise InvalidResponseData("TEXT answers must be a string")


def _check_choice(question: Question, value: Any, values: List[Any], other_response: Optional[str]) -> None:
    if value in values:
        return
    if question.allow_other_option and other_response:
        return
    raise InvalidResponseData(f"'{value}' is not one of the available choices")


def _check_iso(value: Any, parser, message: str) -> None:
    if not isinstance(value, str):
        raise InvalidResponseData(message)
    try:
        parser(value)
    except ValueError:
        raise InvalidResponseData(message)

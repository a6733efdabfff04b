"""Translation of quiz errors into HTTP errors."""
from fastapi import HTTPException

from errors import (
    EmptyFilterResult,
    EmptyParseResult,
    EmptyQuestionSet,
    InvalidTransition,
    MalformedRecord,
    QuizError,
    SourceUnavailable,
)


def to_http_exception(exc: QuizError) -> HTTPException:
    """Map a quiz error to the status code the frontend expects."""
    if isinstance(exc, SourceUnavailable):
        return HTTPException(status_code=502, detail=f"Loading failed: {exc}")
    if isinstance(exc, EmptyParseResult):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, MalformedRecord):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, (EmptyFilterResult, EmptyQuestionSet, InvalidTransition)):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))

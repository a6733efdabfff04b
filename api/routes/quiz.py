"""Quiz session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from api.models import AnswerRequest, FilterRequest, JumpRequest, StartRequest
from api.services.quiz_service import QuizController, get_controller
from api.utils import to_http_exception
from errors import QuizError
from serialization import serialize_question_map, serialize_result, serialize_view
from session import (
    ApplyFilter,
    Event,
    Finish,
    JumpTo,
    Mode,
    Next,
    Prev,
    Retry,
    SelectOption,
    ToggleMode,
)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])

Controller = Annotated[QuizController, Depends(get_controller)]


def _dispatch(controller: QuizController, event: Event) -> dict[str, object]:
    try:
        state = controller.dispatch(event)
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return serialize_view(state)


@router.get("")
def get_view(controller: Controller) -> dict[str, object]:
    """Current view state."""
    return serialize_view(controller.state)


@router.delete("")
def exit_quiz(controller: Controller) -> dict[str, object]:
    """Leave the quiz and return to the source screen."""
    return serialize_view(controller.exit())


@router.post("/start")
def start_quiz(payload: StartRequest, controller: Controller) -> dict[str, object]:
    """Start over the full parsed set."""
    try:
        state = controller.start(Mode(payload.mode))
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return serialize_view(state)


@router.post("/answer")
def answer(payload: AnswerRequest, controller: Controller) -> dict[str, object]:
    return _dispatch(controller, SelectOption(payload.optionId))


@router.post("/next")
def next_question(controller: Controller) -> dict[str, object]:
    return _dispatch(controller, Next())


@router.post("/prev")
def previous_question(controller: Controller) -> dict[str, object]:
    return _dispatch(controller, Prev())


@router.post("/jump")
def jump(payload: JumpRequest, controller: Controller) -> dict[str, object]:
    return _dispatch(controller, JumpTo(payload.index))


@router.post("/filter")
def apply_filter(payload: FilterRequest, controller: Controller) -> dict[str, object]:
    """Restart over the questions matching the section/mistake filter."""
    return _dispatch(
        controller, ApplyFilter(frozenset(payload.sections), payload.mistakesOnly)
    )


@router.post("/mode")
def toggle_mode(controller: Controller) -> dict[str, object]:
    return _dispatch(controller, ToggleMode())


@router.post("/finish")
def finish(controller: Controller) -> dict[str, object]:
    return _dispatch(controller, Finish())


@router.post("/retry")
def retry(controller: Controller) -> dict[str, object]:
    return _dispatch(controller, Retry())


@router.get("/result")
def get_result(controller: Controller) -> dict[str, object]:
    """Score report of the finished quiz."""
    try:
        result = controller.result()
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return serialize_result(result)


@router.get("/map")
def question_map(controller: Controller) -> list[dict[str, object]]:
    """Per-question answer status for the overview grid."""
    return serialize_question_map(controller.state)

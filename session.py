"""
Quiz session state machine.

The whole session is one immutable ``SessionState`` value. ``reduce`` takes
the current state and one event and returns the next state; it never
mutates its input. Precondition violations raise ``InvalidTransition`` and
empty question sets raise ``EmptyQuestionSet`` subclasses, leaving the
caller's state untouched.
"""
from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence, Union

from errors import EmptyFilterResult, EmptyQuestionSet, InvalidTransition
from models import Question, QuestionResult, QuizResult

log = logging.getLogger(__name__)


class Mode(str, enum.Enum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"


class Phase(str, enum.Enum):
    IDLE = "idle"
    QUIZ = "quiz"
    RESULT = "result"


class QuestionStatus(str, enum.Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class FilterSpec:
    sections: frozenset[str] = frozenset()
    mistakes_only: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.sections and not self.mistakes_only


@dataclass(frozen=True)
class SessionState:
    all_questions: tuple[Question, ...] = ()
    questions: tuple[Question, ...] = ()  # active set
    history: tuple[int, ...] = ()
    history_index: int = 0
    answers: dict[str, str] = field(default_factory=dict)
    mode: Mode = Mode.SEQUENTIAL
    filter: FilterSpec = FilterSpec()
    revealed: bool = False
    mistakes: frozenset[str] | None = None  # None: mistake tracking inactive
    phase: Phase = Phase.IDLE

    @property
    def current_index(self) -> int:
        return self.history[self.history_index]

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_index]

    @property
    def visited(self) -> set[int]:
        return set(self.history)

    @property
    def can_go_back(self) -> bool:
        return self.phase is Phase.QUIZ and self.history_index > 0

    @property
    def at_history_end(self) -> bool:
        return self.history_index == len(self.history) - 1


# ---- events ----

@dataclass(frozen=True)
class Start:
    questions: Sequence[Question]
    mode: Mode = Mode.SEQUENTIAL


@dataclass(frozen=True)
class SelectOption:
    option_id: str


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Prev:
    pass


@dataclass(frozen=True)
class JumpTo:
    index: int


@dataclass(frozen=True)
class ApplyFilter:
    sections: frozenset[str] = frozenset()
    mistakes_only: bool = False


@dataclass(frozen=True)
class Finish:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class ToggleMode:
    pass


@dataclass(frozen=True)
class Exit:
    pass


Event = Union[Start, SelectOption, Next, Prev, JumpTo, ApplyFilter, Finish, Retry, ToggleMode, Exit]


def new_state(
        all_questions: Iterable[Question] = (),
        mistakes: Iterable[str] | None = None,
) -> SessionState:
    """Idle state holding the full parsed set, before any Start."""
    return SessionState(
        all_questions=tuple(all_questions),
        mistakes=frozenset(mistakes) if mistakes is not None else None,
    )


def _require_phase(state: SessionState, phase: Phase, event: object) -> None:
    if state.phase is not phase:
        raise InvalidTransition(
            f"{type(event).__name__} is not allowed in the {state.phase.value} phase"
        )


def _is_answered(state: SessionState, index: int) -> bool:
    return state.questions[index].id in state.answers


def _restart(
        state: SessionState,
        questions: Sequence[Question],
        mode: Mode,
        rng: random.Random,
        **changes,
) -> SessionState:
    if not questions:
        raise EmptyQuestionSet("No questions to start a quiz with")
    start_index = rng.randrange(len(questions)) if mode is Mode.RANDOM else 0
    return replace(
        state,
        questions=tuple(questions),
        history=(start_index,),
        history_index=0,
        answers={},
        mode=mode,
        revealed=False,
        phase=Phase.QUIZ,
        **changes,
    )


def _on_start(state: SessionState, event: Start, rng: random.Random) -> SessionState:
    return _restart(
        state,
        event.questions,
        Mode(event.mode),
        rng,
        all_questions=tuple(event.questions),
        filter=FilterSpec(),
    )


def _on_select(state: SessionState, event: SelectOption, rng: random.Random) -> SessionState:
    _require_phase(state, Phase.QUIZ, event)
    if state.revealed:
        raise InvalidTransition("Current question is already answered")
    question = state.current_question
    option_id = (event.option_id or "").strip().lower()
    if not question.has_option(option_id):
        raise InvalidTransition(f"Question {question.id} has no option '{option_id}'")

    answers = dict(state.answers)
    answers[question.id] = option_id

    mistakes = state.mistakes
    if mistakes is not None:
        if option_id == question.correct_answer:
            mistakes = mistakes - {question.id}
        else:
            mistakes = mistakes | {question.id}
    return replace(state, answers=answers, revealed=True, mistakes=mistakes)


def _on_next(state: SessionState, event: Next, rng: random.Random) -> SessionState:
    _require_phase(state, Phase.QUIZ, event)
    if not state.revealed:
        raise InvalidTransition("Answer the current question before moving on")

    if not state.at_history_end:
        index = state.history_index + 1
        return replace(
            state,
            history_index=index,
            revealed=_is_answered(state, state.history[index]),
        )

    if state.mode is Mode.RANDOM:
        visited = state.visited
        unvisited = [i for i in range(len(state.questions)) if i not in visited]
        if not unvisited:
            return replace(state, phase=Phase.RESULT)
        next_index = unvisited[rng.randrange(len(unvisited))]
    else:
        if state.current_index >= len(state.questions) - 1:
            return replace(state, phase=Phase.RESULT)
        next_index = state.current_index + 1

    history = state.history + (next_index,)
    return replace(state, history=history, history_index=len(history) - 1, revealed=False)


def _on_prev(state: SessionState, event: Prev, rng: random.Random) -> SessionState:
    _require_phase(state, Phase.QUIZ, event)
    if state.history_index <= 0:
        raise InvalidTransition("Already at the first visited question")
    index = state.history_index - 1
    return replace(
        state,
        history_index=index,
        revealed=_is_answered(state, state.history[index]),
    )


def _on_jump(state: SessionState, event: JumpTo, rng: random.Random) -> SessionState:
    _require_phase(state, Phase.QUIZ, event)
    if not 0 <= event.index < len(state.questions):
        raise InvalidTransition(f"Question index {event.index} is out of range")
    # a new branch drops the forward steps
    history = state.history[: state.history_index + 1] + (event.index,)
    return replace(
        state,
        history=history,
        history_index=len(history) - 1,
        revealed=_is_answered(state, event.index),
    )


def filter_questions(
        questions: Iterable[Question],
        sections: Iterable[str] = (),
        mistakes_only: bool = False,
        mistakes: Iterable[str] | None = None,
) -> list[Question]:
    selected = set(sections)
    result = list(questions)
    if selected:
        result = [q for q in result if q.section in selected]
    if mistakes_only:
        mistake_ids = set(mistakes or ())
        result = [q for q in result if q.id in mistake_ids]
    return result


def _on_filter(state: SessionState, event: ApplyFilter, rng: random.Random) -> SessionState:
    spec = FilterSpec(frozenset(event.sections), event.mistakes_only)
    active = filter_questions(
        state.all_questions, spec.sections, spec.mistakes_only, state.mistakes
    )
    if not active:
        raise EmptyFilterResult("No questions match the selected filter")
    log.info("Filter applied: %d / %d questions", len(active), len(state.all_questions))
    return _restart(state, active, state.mode, rng, filter=spec)


def _on_finish(state: SessionState, event: Finish, rng: random.Random) -> SessionState:
    _require_phase(state, Phase.QUIZ, event)
    return replace(state, phase=Phase.RESULT)


def _on_retry(state: SessionState, event: Retry, rng: random.Random) -> SessionState:
    _require_phase(state, Phase.RESULT, event)
    return _restart(state, state.questions, state.mode, rng)


def _on_toggle_mode(state: SessionState, event: ToggleMode, rng: random.Random) -> SessionState:
    mode = Mode.SEQUENTIAL if state.mode is Mode.RANDOM else Mode.RANDOM
    return replace(state, mode=mode)


def _on_exit(state: SessionState, event: Exit, rng: random.Random) -> SessionState:
    return new_state(state.all_questions, state.mistakes)


_HANDLERS = {
    Start: _on_start,
    SelectOption: _on_select,
    Next: _on_next,
    Prev: _on_prev,
    JumpTo: _on_jump,
    ApplyFilter: _on_filter,
    Finish: _on_finish,
    Retry: _on_retry,
    ToggleMode: _on_toggle_mode,
    Exit: _on_exit,
}


def reduce(state: SessionState, event: Event, rng: random.Random | None = None) -> SessionState:
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown session event: {event!r}")
    return handler(state, event, rng or random.Random())


# ---- derived values ----

def is_last_question(state: SessionState) -> bool:
    """Whether the next Next would finish the quiz (label only)."""
    if state.phase is not Phase.QUIZ:
        return False
    if state.mode is Mode.RANDOM:
        return len(state.visited) == len(state.questions) and state.at_history_end
    return state.current_index == len(state.questions) - 1 and state.at_history_end


def progress(state: SessionState) -> tuple[int, int]:
    """(position, total) as shown above the question."""
    total = len(state.questions)
    if state.phase is Phase.IDLE or not total:
        return 0, total
    if state.mode is Mode.RANDOM:
        return len(state.visited), total
    return state.current_index + 1, total


def question_status(state: SessionState, index: int) -> QuestionStatus:
    question = state.questions[index]
    answer = state.answers.get(question.id)
    if answer is None:
        return QuestionStatus.UNANSWERED
    if answer == question.correct_answer:
        return QuestionStatus.CORRECT
    return QuestionStatus.INCORRECT


def available_sections(questions: Iterable[Question]) -> list[str]:
    sections: list[str] = []
    for question in questions:
        if question.section and question.section not in sections:
            sections.append(question.section)
    return sections


def compute_result(state: SessionState) -> QuizResult:
    history: list[QuestionResult] = []
    correct = 0
    for question in state.questions:
        selected = state.answers.get(question.id)
        is_correct = selected is not None and selected == question.correct_answer
        if is_correct:
            correct += 1
        history.append(QuestionResult(question.id, selected, is_correct))
    total = len(state.questions)
    return QuizResult(total=total, correct=correct, wrong=total - correct, history=history)

"""Service layer owning the single local quiz session."""
from __future__ import annotations

import logging
import random
import threading
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from api.config import (
    ANSWER_MARKERS,
    MISTAKES_KEY,
    QUIZ_RANDOM_SEED,
    SOURCE_TIMEOUT_SECONDS,
)
from errors import EmptyParseResult, EmptyQuestionSet, InvalidTransition
from mistakes import clear_mistakes, load_mistakes, save_mistakes
from models import ParseReport, QuizResult
from question_parser import QuestionParser
from session import Event, Exit, Mode, Phase, SessionState, Start, compute_result, new_state, reduce
from sources import load_questions, parse_source_bytes
from storage import KeyValueStore

log = logging.getLogger(__name__)


class QuizController:
    """
    Holds the parsed question set and the current SessionState.
    Every event goes through ``reduce``; the mistake set is written back to
    the store whenever a transition changed it.
    """

    def __init__(
            self,
            store: KeyValueStore,
            rng: random.Random | None = None,
            answer_markers: Sequence[str] = ANSWER_MARKERS,
            mistakes_key: str = MISTAKES_KEY,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.answer_markers = tuple(answer_markers)
        self.mistakes_key = mistakes_key
        self.report: ParseReport | None = None
        self._lock = threading.Lock()
        self.state: SessionState = new_state(
            mistakes=load_mistakes(store, mistakes_key)
        )
        log.info("Loaded %d remembered mistakes", len(self.state.mistakes or ()))

    # ---- loading ----
    def _install(self, report: ParseReport, mode: Mode, start: bool) -> SessionState:
        if not report.questions:
            raise EmptyParseResult("No valid questions found. Please check the format.")
        with self._lock:
            idle = new_state(report.questions, self.state.mistakes)
            state = reduce(idle, Start(report.questions, mode), self.rng) if start else idle
            self.report = report
            self.state = state
            return state

    def load_text(self, text: str, mode: Mode = Mode.SEQUENTIAL, start: bool = True) -> SessionState:
        report = QuestionParser(self.answer_markers).parse_text_report(text)
        return self._install(report, mode, start)

    def load_records(
            self, records: list[object], mode: Mode = Mode.SEQUENTIAL, start: bool = True
    ) -> SessionState:
        parser = QuestionParser(self.answer_markers)
        questions = parser.parse_structured(records)
        report = ParseReport(questions=questions, candidate_blocks=len(records), logs=parser.logs)
        return self._install(report, mode, start)

    def load_bytes(
            self, data: bytes, filename: str, mode: Mode = Mode.SEQUENTIAL, start: bool = True
    ) -> SessionState:
        report = parse_source_bytes(data, Path(filename).suffix, self.answer_markers)
        return self._install(report, mode, start)

    def load_location(
            self, location: str | Path, mode: Mode = Mode.SEQUENTIAL, start: bool = True
    ) -> SessionState:
        report = load_questions(location, self.answer_markers, SOURCE_TIMEOUT_SECONDS)
        return self._install(report, mode, start)

    # ---- events ----
    def dispatch(self, event: Event) -> SessionState:
        with self._lock:
            before = self.state
            after = reduce(before, event, self.rng)
            self.state = after
            # the stored value must match the state it was written from
            if after.mistakes is not None and after.mistakes != before.mistakes:
                save_mistakes(self.store, after.mistakes, self.mistakes_key)
            return after

    def start(self, mode: Mode = Mode.SEQUENTIAL) -> SessionState:
        if not self.state.all_questions:
            raise EmptyQuestionSet("No questions loaded")
        return self.dispatch(Start(self.state.all_questions, mode))

    def exit(self) -> SessionState:
        return self.dispatch(Exit())

    def result(self) -> QuizResult:
        if self.state.phase is not Phase.RESULT:
            raise InvalidTransition("The quiz is not finished yet")
        return compute_result(self.state)

    # ---- mistakes ----
    def mistakes(self) -> list[str]:
        return sorted(self.state.mistakes or ())

    def clear_mistakes(self) -> None:
        with self._lock:
            self.state = replace(self.state, mistakes=frozenset())
            clear_mistakes(self.store, self.mistakes_key)


_controller: QuizController | None = None


def get_controller() -> QuizController:
    """Dependency returning the process-wide controller."""
    global _controller
    if _controller is None:
        from api.services.store_service import SqlKeyValueStore

        rng = random.Random(QUIZ_RANDOM_SEED) if QUIZ_RANDOM_SEED is not None else None
        _controller = QuizController(SqlKeyValueStore(), rng=rng)
    return _controller

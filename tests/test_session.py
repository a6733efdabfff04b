import random

import pytest

from errors import EmptyFilterResult, EmptyQuestionSet, InvalidTransition
from models import Option, Question
from session import (
    ApplyFilter,
    Exit,
    Finish,
    JumpTo,
    Mode,
    Next,
    Phase,
    Prev,
    QuestionStatus,
    Retry,
    SelectOption,
    Start,
    ToggleMode,
    available_sections,
    compute_result,
    is_last_question,
    new_state,
    progress,
    question_status,
    reduce,
)


def make_questions(count: int, sections: list | None = None) -> list[Question]:
    questions = []
    for i in range(count):
        questions.append(
            Question(
                id=f"1.{i + 1}",
                text=f"Question {i + 1}",
                options=(Option("a", "yes"), Option("b", "no"), Option("c", "maybe")),
                correct_answer="a",
                section=sections[i] if sections else None,
            )
        )
    return questions


def started(count=3, mode=Mode.SEQUENTIAL, seed=7, sections=None, mistakes=None):
    rng = random.Random(seed)
    state = new_state(make_questions(count, sections), mistakes=mistakes)
    return reduce(state, Start(state.all_questions, mode), rng), rng


def answer_and_next(state, rng, option_id: str = "a"):
    state = reduce(state, SelectOption(option_id), rng)
    return reduce(state, Next(), rng)


def test_start_sequential() -> None:
    state, _ = started()

    assert state.phase is Phase.QUIZ
    assert state.history == (0,)
    assert state.history_index == 0
    assert state.answers == {}
    assert state.revealed is False
    assert state.current_question.id == "1.1"


def test_start_random_uses_injected_rng() -> None:
    state_a, _ = started(10, Mode.RANDOM, seed=3)
    state_b, _ = started(10, Mode.RANDOM, seed=3)

    assert state_a.history == state_b.history
    assert 0 <= state_a.history[0] < 10


def test_start_with_new_set_replaces_filter_source() -> None:
    state, rng = started(3, sections=["Lifting", "Lifting", "Chemicals"])
    other = [
        Question(
            id="9.1",
            text="Other",
            options=(Option("a", "x"), Option("b", "y")),
            correct_answer="b",
            section="Fire",
        )
    ]

    state = reduce(state, Start(other, Mode.SEQUENTIAL), rng)
    assert [q.id for q in state.all_questions] == ["9.1"]
    assert available_sections(state.all_questions) == ["Fire"]

    filtered = reduce(state, ApplyFilter(frozenset({"Fire"})), rng)
    assert [q.id for q in filtered.questions] == ["9.1"]
    with pytest.raises(EmptyFilterResult):
        reduce(state, ApplyFilter(frozenset({"Lifting"})), rng)


def test_start_with_no_questions_raises() -> None:
    with pytest.raises(EmptyQuestionSet):
        reduce(new_state(), Start([], Mode.SEQUENTIAL))


def test_select_records_answer_and_reveals() -> None:
    state, rng = started()
    after = reduce(state, SelectOption("B"), rng)

    assert after.answers == {"1.1": "b"}
    assert after.revealed is True
    assert state.answers == {}
    assert state.revealed is False


def test_select_twice_is_refused() -> None:
    state, rng = started()
    state = reduce(state, SelectOption("a"), rng)
    with pytest.raises(InvalidTransition):
        reduce(state, SelectOption("b"), rng)


def test_select_unknown_option_is_refused() -> None:
    state, rng = started()
    with pytest.raises(InvalidTransition):
        reduce(state, SelectOption("z"), rng)


def test_next_requires_reveal() -> None:
    state, rng = started()
    with pytest.raises(InvalidTransition):
        reduce(state, Next(), rng)


def test_prev_at_start_is_refused() -> None:
    state, rng = started()
    with pytest.raises(InvalidTransition):
        reduce(state, Prev(), rng)


def test_sequential_visits_every_index_in_order() -> None:
    state, rng = started(5)
    visited = [state.current_index]
    while state.phase is Phase.QUIZ:
        state = answer_and_next(state, rng)
        if state.phase is Phase.QUIZ:
            visited.append(state.current_index)

    assert visited == [0, 1, 2, 3, 4]
    assert state.phase is Phase.RESULT


def test_random_never_revisits_and_completes_after_all() -> None:
    state, rng = started(8, Mode.RANDOM, seed=11)
    steps = 1
    while True:
        state = answer_and_next(state, rng)
        if state.phase is Phase.RESULT:
            break
        steps += 1
        assert len(set(state.history)) == len(state.history)

    assert steps == 8
    assert sorted(state.history) == list(range(8))


def test_prev_then_next_replays_history() -> None:
    state, rng = started(4, Mode.RANDOM, seed=5)
    state = answer_and_next(state, rng)
    state = answer_and_next(state, rng)
    before = state
    history = state.history

    state = reduce(state, Prev(), rng)
    assert state.revealed is True
    state = reduce(state, Next(), rng)

    assert state.history == history
    assert state.current_question.id == before.current_question.id
    assert state.revealed == before.revealed


def test_prev_recomputes_reveal_from_answers() -> None:
    state, rng = started()
    state = answer_and_next(state, rng)
    assert state.revealed is False

    back = reduce(state, Prev(), rng)
    assert back.history_index == 0
    assert back.revealed is True


def test_jump_truncates_forward_steps() -> None:
    state, rng = started(6)
    for _ in range(4):
        state = answer_and_next(state, rng)
    state = reduce(state, Prev(), rng)
    state = reduce(state, Prev(), rng)
    state = reduce(state, Prev(), rng)
    assert state.history_index == 1

    jumped = reduce(state, JumpTo(5), rng)

    assert jumped.history == (0, 1, 5)
    assert len(jumped.history) == state.history_index + 2
    assert jumped.current_index == 5
    assert jumped.revealed is False


def test_jump_to_answered_question_reveals() -> None:
    state, rng = started(3)
    state = answer_and_next(state, rng)
    jumped = reduce(state, JumpTo(0), rng)

    assert jumped.history == (0, 1, 0)
    assert jumped.revealed is True


def test_jump_out_of_range_is_refused() -> None:
    state, rng = started(3)
    with pytest.raises(InvalidTransition):
        reduce(state, JumpTo(3), rng)


def test_history_index_stays_in_bounds() -> None:
    rng = random.Random(42)
    state, _ = started(6, Mode.RANDOM, seed=42)
    for _ in range(200):
        if state.phase is not Phase.QUIZ:
            state = reduce(state, Retry(), rng)
        choice = rng.choice(["select", "next", "prev", "jump"])
        try:
            if choice == "select":
                state = reduce(state, SelectOption(rng.choice("abc")), rng)
            elif choice == "next":
                state = reduce(state, Next(), rng)
            elif choice == "prev":
                state = reduce(state, Prev(), rng)
            else:
                state = reduce(state, JumpTo(rng.randrange(6)), rng)
        except InvalidTransition:
            pass
        if state.phase is Phase.QUIZ:
            assert 0 <= state.history_index < len(state.history)
            assert all(0 <= i < 6 for i in state.history)


def test_is_last_question_sequential() -> None:
    state, rng = started(2)
    assert is_last_question(state) is False
    state = answer_and_next(state, rng)
    assert is_last_question(state) is True

    back = reduce(state, Prev(), rng)
    assert is_last_question(back) is False


def test_is_last_question_random() -> None:
    state, rng = started(2, Mode.RANDOM)
    assert is_last_question(state) is False
    state = answer_and_next(state, rng)
    assert is_last_question(state) is True


def test_progress_label() -> None:
    state, rng = started(3)
    assert progress(state) == (1, 3)
    state = answer_and_next(state, rng)
    assert progress(state) == (2, 3)

    random_state, rng = started(3, Mode.RANDOM)
    random_state = answer_and_next(random_state, rng)
    assert progress(random_state) == (2, 3)


def test_finish_and_retry() -> None:
    state, rng = started(3, Mode.RANDOM)
    state = reduce(state, SelectOption("b"), rng)
    state = reduce(state, Finish(), rng)
    assert state.phase is Phase.RESULT

    with pytest.raises(InvalidTransition):
        reduce(state, Next(), rng)

    retried = reduce(state, Retry(), rng)
    assert retried.phase is Phase.QUIZ
    assert retried.answers == {}
    assert retried.mode is Mode.RANDOM
    assert retried.questions == state.questions
    assert len(retried.history) == 1


def test_retry_only_from_result() -> None:
    state, rng = started()
    with pytest.raises(InvalidTransition):
        reduce(state, Retry(), rng)


def test_compute_result_counts_unanswered_as_wrong() -> None:
    state, rng = started(3)
    state = answer_and_next(state, rng, "a")
    state = reduce(state, SelectOption("c"), rng)

    result = compute_result(state)

    assert (result.total, result.correct, result.wrong) == (3, 1, 2)
    assert [item.selected for item in result.history] == ["a", "c", None]
    assert [item.is_correct for item in result.history] == [True, False, False]


def test_compute_result_all_correct() -> None:
    state, rng = started(4)
    while state.phase is Phase.QUIZ:
        state = answer_and_next(state, rng, "a")

    result = compute_result(state)
    assert result.correct == result.total == 4
    assert result.wrong == 0
    assert result.percentage == 100


def test_mistakes_are_added_and_self_corrected() -> None:
    state, rng = started(2, mistakes=frozenset({"1.2"}))
    state = reduce(state, SelectOption("b"), rng)
    assert state.mistakes == frozenset({"1.1", "1.2"})

    state = reduce(state, Next(), rng)
    state = reduce(state, SelectOption("a"), rng)
    assert state.mistakes == frozenset({"1.1"})


def test_mistakes_untouched_when_tracking_inactive() -> None:
    state, rng = started(2)
    state = reduce(state, SelectOption("b"), rng)
    assert state.mistakes is None


def test_filter_by_section() -> None:
    state, rng = started(4, sections=["A", "B", "A", "C"])
    state = answer_and_next(state, rng)

    filtered = reduce(state, ApplyFilter(frozenset({"A"})), rng)

    assert [q.id for q in filtered.questions] == ["1.1", "1.3"]
    assert filtered.history == (0,)
    assert filtered.answers == {}
    assert filtered.filter.sections == frozenset({"A"})
    assert len(filtered.all_questions) == 4


def test_filter_mistakes_only() -> None:
    state, rng = started(3, mistakes=frozenset({"1.3"}))
    filtered = reduce(state, ApplyFilter(mistakes_only=True), rng)
    assert [q.id for q in filtered.questions] == ["1.3"]


def test_empty_filter_leaves_state_untouched() -> None:
    state, rng = started(3, sections=["A", "A", "B"])
    state = reduce(state, SelectOption("a"), rng)

    with pytest.raises(EmptyFilterResult):
        reduce(state, ApplyFilter(frozenset({"missing"})), rng)
    with pytest.raises(EmptyFilterResult):
        reduce(state, ApplyFilter(mistakes_only=True), rng)

    assert state.answers == {"1.1": "a"}
    assert state.phase is Phase.QUIZ


def test_toggle_mode_keeps_progress() -> None:
    state, rng = started(3)
    state = answer_and_next(state, rng)
    toggled = reduce(state, ToggleMode(), rng)

    assert toggled.mode is Mode.RANDOM
    assert toggled.history == state.history
    assert toggled.answers == state.answers


def test_exit_returns_to_idle_and_keeps_questions() -> None:
    state, rng = started(3, mistakes=frozenset({"1.2"}))
    idle = reduce(state, Exit(), rng)

    assert idle.phase is Phase.IDLE
    assert len(idle.all_questions) == 3
    assert idle.mistakes == frozenset({"1.2"})
    with pytest.raises(InvalidTransition):
        reduce(idle, Next(), rng)


def test_question_status_and_sections() -> None:
    state, rng = started(3, sections=["X", None, "Y"])
    state = answer_and_next(state, rng, "b")

    assert question_status(state, 0) is QuestionStatus.INCORRECT
    assert question_status(state, 1) is QuestionStatus.UNANSWERED
    assert available_sections(state.all_questions) == ["X", "Y"]


def test_unknown_event_is_a_type_error() -> None:
    state, rng = started()
    with pytest.raises(TypeError):
        reduce(state, object(), rng)

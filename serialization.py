from __future__ import annotations

from typing import Any, Iterable

from models import ParseReport, Question, QuizResult
from session import (
    Phase,
    SessionState,
    available_sections,
    is_last_question,
    progress,
    question_status,
)


def serialize_question(question: Question, reveal_answer: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": question.id,
        "questionText": question.text,
        "options": [{"id": option.id, "text": option.text} for option in question.options],
        "category": question.section,
    }
    if reveal_answer:
        payload["correctAnswer"] = question.correct_answer
    return payload


def serialize_questions(questions: Iterable[Question]) -> list[dict[str, Any]]:
    return [serialize_question(question) for question in questions]


def serialize_parse_report(report: ParseReport) -> dict[str, Any]:
    questions = report.questions
    return {
        "questionCount": report.parsed,
        "candidateBlocks": report.candidate_blocks,
        "dropped": report.dropped,
        "sections": available_sections(questions),
        "logs": list(report.logs),
    }


def serialize_question_map(state: SessionState) -> list[dict[str, Any]]:
    if state.phase is Phase.IDLE:
        return []
    current = state.current_index if state.phase is Phase.QUIZ else None
    return [
        {
            "index": index,
            "id": question.id,
            "status": question_status(state, index).value,
            "isCurrent": index == current,
        }
        for index, question in enumerate(state.questions)
    ]


def serialize_view(state: SessionState) -> dict[str, Any]:
    position, total = progress(state)
    payload: dict[str, Any] = {
        "phase": state.phase.value,
        "mode": state.mode.value,
        "filter": {
            "sections": sorted(state.filter.sections),
            "mistakesOnly": state.filter.mistakes_only,
        },
        "progress": {"position": position, "total": total},
        "sections": available_sections(state.all_questions),
        "mistakeCount": len(state.mistakes) if state.mistakes is not None else None,
    }
    if state.phase is not Phase.QUIZ:
        return payload

    question = state.current_question
    payload.update(
        {
            "question": serialize_question(question, reveal_answer=state.revealed),
            "questionIndex": state.current_index,
            "selectedOption": state.answers.get(question.id),
            "revealed": state.revealed,
            "history": list(state.history),
            "historyIndex": state.history_index,
            "canGoBack": state.can_go_back,
            "canGoNext": state.revealed,
            "isLastQuestion": is_last_question(state),
        }
    )
    return payload


def serialize_result(result: QuizResult) -> dict[str, Any]:
    return {
        "total": result.total,
        "correct": result.correct,
        "wrong": result.wrong,
        "percentage": result.percentage,
        "history": [
            {
                "questionId": item.question_id,
                "userSelected": item.selected,
                "isCorrect": item.is_correct,
            }
            for item in result.history
        ],
    }

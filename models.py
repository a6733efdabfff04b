from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Option:
    id: str  # single lowercase letter
    text: str


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    options: tuple[Option, ...]
    correct_answer: str
    section: str | None = None

    def option_ids(self) -> list[str]:
        return [option.id for option in self.options]

    def has_option(self, option_id: str) -> bool:
        return any(option.id == option_id for option in self.options)


@dataclass
class ParseReport:
    questions: list[Question]
    candidate_blocks: int = 0
    logs: list[str] = field(default_factory=list)

    @property
    def parsed(self) -> int:
        return len(self.questions)

    @property
    def dropped(self) -> int:
        return max(self.candidate_blocks - self.parsed, 0)


@dataclass(frozen=True)
class QuestionResult:
    question_id: str
    selected: str | None
    is_correct: bool


@dataclass
class QuizResult:
    total: int
    correct: int
    wrong: int
    history: list[QuestionResult] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        if not self.total:
            return 0
        return round(self.correct / self.total * 100)

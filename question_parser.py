from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from errors import MalformedRecord
from models import Option, ParseReport, Question

log = logging.getLogger(__name__)

DEFAULT_ANSWER_MARKERS = ("答案", "Answer", "Ans")

# "1 text" / "1.1 text"
QUESTION_START_RE = re.compile(r"^(\d+(?:\.\d+)?)\s+(.*)$")
# "a. text" / "a) text" / "a、text" / "a．text"; ASCII delimiters need a space
OPTION_RE = re.compile(r"^([a-zA-Z])(?:[.)]\s+|[、．]\s*)(.*)$")
# "1. 體力處理操作": dot followed by whitespace, so never a question start
SECTION_RE = re.compile(r"^\d+\.\s+(.+)$")

STRUCTURED_OPTION_IDS = ("a", "b", "c")


def build_answer_pattern(markers: Iterable[str]) -> re.Pattern[str]:
    ordered = sorted({m.strip() for m in markers if m and m.strip()}, key=len, reverse=True)
    if not ordered:
        raise ValueError("At least one answer marker is required")
    alternatives = "|".join(re.escape(m) for m in ordered)
    return re.compile(rf"^(?:{alternatives})\s*[:：]\s*([a-zA-Z])", re.IGNORECASE)


class StructuredOptions(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    a: str
    b: str
    c: str


class StructuredRecord(BaseModel):
    """One entry of an extracted_questions.json style list."""

    model_config = ConfigDict(str_strip_whitespace=True)

    index: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    options: StructuredOptions
    answer: str
    category: str | None = None
    section: str | None = None

    @field_validator("index", mode="before")
    @classmethod
    def _index_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("answer")
    @classmethod
    def _normalize_answer(cls, value: str) -> str:
        answer = value.lower()
        if answer not in STRUCTURED_OPTION_IDS:
            raise ValueError("answer must be one of a, b, c")
        return answer


def _validation_detail(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "record"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


class _Block:
    """Question being accumulated between its start line and its answer line."""

    def __init__(self, question_id: str, text: str, section: str | None):
        self.question_id = question_id
        self.text = text
        self.section = section
        self.options: list[Option] = []


class QuestionParser:
    def __init__(self, answer_markers: Sequence[str] = DEFAULT_ANSWER_MARKERS):
        self.answer_re = build_answer_pattern(answer_markers)
        self.logs: list[str] = []  # short diagnostics of the last parse

    # ---- text form ----
    def parse_text_report(self, raw: str) -> ParseReport:
        """
        Single pass over trimmed non-empty lines.
        Never raises: blocks that cannot be validated are dropped and counted.
        """
        self.logs = []
        questions: list[Question] = []
        seen_ids: set[str] = set()
        candidates = 0
        section: str | None = None
        block: _Block | None = None

        lines = [line.strip() for line in (raw or "").splitlines()]
        for line_no, line in enumerate(lines, start=1):
            if not line:
                continue

            answer_match = self.answer_re.match(line)
            if answer_match and block is not None:
                question = self._close_block(block, answer_match.group(1).lower(), seen_ids, line_no)
                if question is not None:
                    questions.append(question)
                    seen_ids.add(question.id)
                block = None
                continue

            option_match = OPTION_RE.match(line)
            if option_match and block is not None:
                block.options.append(
                    Option(option_match.group(1).lower(), option_match.group(2).strip())
                )
                continue

            start_match = QUESTION_START_RE.match(line)
            if start_match:
                if block is not None:
                    self.logs.append(f"Question {block.question_id}: no answer line, dropped")
                candidates += 1
                block = _Block(start_match.group(1), start_match.group(2).strip(), section)
                continue

            section_match = SECTION_RE.match(line)
            if section_match:
                section = section_match.group(1).strip()
                log.debug("Section header at line %d: %s", line_no, section)

        if block is not None:
            self.logs.append(f"Question {block.question_id}: no answer line, dropped")

        report = ParseReport(questions=questions, candidate_blocks=candidates, logs=self.logs)
        log.info(
            "Parsed %d / %d question blocks (%d dropped)",
            report.parsed,
            report.candidate_blocks,
            report.dropped,
        )
        self.logs.append(f"Questions parsed: {report.parsed} / {report.candidate_blocks}")
        return report

    def _close_block(
            self,
            block: _Block,
            answer: str,
            seen_ids: set[str],
            line_no: int,
    ) -> Question | None:
        if not block.question_id or not block.text or not block.options:
            self.logs.append(f"Question {block.question_id or '?'}: incomplete block, dropped")
            return None
        option_ids = [option.id for option in block.options]
        if len(set(option_ids)) != len(option_ids):
            self.logs.append(f"Question {block.question_id}: duplicate option letters, dropped")
            return None
        if answer not in option_ids:
            self.logs.append(
                f"Question {block.question_id}: answer '{answer}' matches no option, dropped"
            )
            return None
        if block.question_id in seen_ids:
            self.logs.append(f"Question {block.question_id}: duplicate id, dropped")
            log.debug("Duplicate question id %s at line %d", block.question_id, line_no)
            return None
        return Question(
            id=block.question_id,
            text=block.text,
            options=tuple(block.options),
            correct_answer=answer,
            section=block.section,
        )

    def parse_text(self, raw: str) -> list[Question]:
        return self.parse_text_report(raw).questions

    # ---- structured form ----
    def parse_structured(self, records: Sequence[Any]) -> list[Question]:
        """
        Strict mapping of {index, question, options{a,b,c}, answer} records.
        Raises MalformedRecord on the first record that does not fit.
        """
        self.logs = []
        if not isinstance(records, (list, tuple)):
            raise MalformedRecord(0, "expected a list of records")

        questions: list[Question] = []
        seen_ids: set[str] = set()
        for position, raw_record in enumerate(records, start=1):
            if not isinstance(raw_record, dict):
                raise MalformedRecord(position, "record must be an object")
            try:
                record = StructuredRecord.model_validate(raw_record)
            except ValidationError as exc:
                raise MalformedRecord(position, _validation_detail(exc)) from exc
            if record.index in seen_ids:
                raise MalformedRecord(position, f"duplicate index {record.index}")
            seen_ids.add(record.index)
            questions.append(
                Question(
                    id=record.index,
                    text=record.question,
                    options=tuple(
                        Option(option_id, getattr(record.options, option_id))
                        for option_id in STRUCTURED_OPTION_IDS
                    ),
                    correct_answer=record.answer,
                    section=record.category or record.section,
                )
            )

        log.info("Mapped %d structured records", len(questions))
        self.logs.append(f"Questions parsed: {len(questions)} / {len(records)}")
        return questions


def parse_from_text(raw: str) -> list[Question]:
    return QuestionParser().parse_text(raw)


def parse_from_structured(records: Sequence[Any]) -> list[Question]:
    return QuestionParser().parse_structured(records)


SAMPLE_TEXT = """
1. 體力處理操作

1.1 工友搬運重物時，應依從下列哪一項做法才正確？
a. 採用搬運姿勢應盡量保持背部挺直
b. 盡量搬多一些，快點完成工作減少意外機會
c. 盡量將物件遠離身體
答案：a

1.2 下列哪一項不是正確人力提舉的要點？
a. 貨物提舉時，使用腰部力量
b. 用手掌緊握貨物，手臂要緊貼身體
c. 利用雙腳來改變方向
答案：a

1.3 提舉重物時，最適宜運用身體哪部份的肌肉？
a. 腰背
b. 腿部
c. 手臂
答案：b

1.4 人體的最大提舉能力是當手握貨物底部離地多少距離？
a. 300至500毫米
b. 500至700毫米
c. 700至900毫米
答案：b

1.5 下列哪一項不是由於使用錯誤提舉重物姿勢所引致的健康損害？
a. 腰背扭傷
b. 疝氣
c. 下肢靜脈曲張
答案：c
"""

"""
Question source loading: local files or http(s) URLs.

Fetch failures become SourceUnavailable; successful reads that yield no
valid question become EmptyParseResult. There is no retry.
"""
from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests

from api.utils.json_utils import json_load
from errors import EmptyParseResult, SourceUnavailable
from models import ParseReport
from question_parser import DEFAULT_ANSWER_MARKERS, QuestionParser
from word_source import extract_docx_text

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def _is_url(location: str | Path) -> bool:
    return urlparse(str(location)).scheme in {"http", "https"}


def _source_suffix(location: str | Path) -> str:
    if _is_url(location):
        return Path(urlparse(str(location)).path).suffix.lower()
    return Path(location).suffix.lower()


def fetch_bytes(location: str | Path, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    if _is_url(location):
        try:
            response = requests.get(str(location), timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            log.error("Fetching %s failed: %s", location, exc)
            raise SourceUnavailable(f"Failed to load questions from {location}") from exc
        return response.content

    path = Path(location)
    try:
        return path.read_bytes()
    except OSError as exc:
        log.error("Reading %s failed: %s", path, exc)
        raise SourceUnavailable(f"Failed to load questions from {path}") from exc


def fetch_text(location: str | Path, timeout: float = DEFAULT_TIMEOUT) -> str:
    data = fetch_bytes(location, timeout)
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SourceUnavailable(f"{location} is not UTF-8 text") from exc


def fetch_json(location: str | Path, timeout: float = DEFAULT_TIMEOUT) -> object:
    text = fetch_text(location, timeout)
    try:
        return json_load(text)
    except ValueError as exc:
        raise SourceUnavailable(f"{location} is not valid JSON") from exc


def parse_source_bytes(
        data: bytes,
        suffix: str,
        answer_markers=DEFAULT_ANSWER_MARKERS,
) -> ParseReport:
    """Parse raw file content, choosing the parser by file suffix."""
    parser = QuestionParser(answer_markers)
    suffix = suffix.lower()
    if suffix == ".json":
        try:
            records = json_load(data.decode("utf-8-sig"))
        except ValueError as exc:
            raise SourceUnavailable("Question file is not valid JSON") from exc
        questions = parser.parse_structured(records)
        report = ParseReport(questions=questions, candidate_blocks=len(records), logs=parser.logs)
    elif suffix == ".docx":
        try:
            text = extract_docx_text(data)
        except Exception as exc:  # python-docx raises assorted zip/xml errors
            raise SourceUnavailable("Word document could not be read") from exc
        report = parser.parse_text_report(text)
    else:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SourceUnavailable("Question file is not UTF-8 text") from exc
        report = parser.parse_text_report(text)

    if not report.questions:
        raise EmptyParseResult("No valid questions found. Please check the format.")
    return report


def load_questions(
        location: str | Path,
        answer_markers=DEFAULT_ANSWER_MARKERS,
        timeout: float = DEFAULT_TIMEOUT,
) -> ParseReport:
    log.info("Loading questions from %s", location)
    data = fetch_bytes(location, timeout)
    return parse_source_bytes(data, _source_suffix(location), answer_markers)

import argparse
import sys
from pathlib import Path

from api.utils.json_utils import write_json_file
from core.logging_setup import setup_console_logging
from errors import QuizError
from question_parser import DEFAULT_ANSWER_MARKERS
from serialization import serialize_parse_report, serialize_questions
from sources import load_questions

setup_console_logging()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse a multiple-choice question file")
    parser.add_argument("source", help="Path or http(s) URL of a .txt, .json or .docx file")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/parsed"),
        help="Output directory for questions.json",
    )
    parser.add_argument(
        "--answer-marker",
        action="append",
        dest="answer_markers",
        help="Answer line marker (repeatable), default: 答案 / Answer / Ans",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    markers = tuple(args.answer_markers or DEFAULT_ANSWER_MARKERS)

    try:
        report = load_questions(args.source, markers)
    except QuizError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    payload = {
        "source": str(args.source),
        **serialize_parse_report(report),
        "questions": serialize_questions(report.questions),
    }
    out_path = args.output / "questions.json"
    write_json_file(out_path, payload)

    for line in report.logs:
        print(line)
    print(f"Saved {report.parsed} questions to {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import json
from pathlib import Path

import cli
from question_parser import SAMPLE_TEXT


def test_cli_writes_questions_json(tmp_path: Path, capsys) -> None:
    source = tmp_path / "quiz.txt"
    source.write_text(SAMPLE_TEXT + "\n9.9 unterminated\na. x\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    assert cli.main([str(source), "--output", str(out_dir)]) == 0

    payload = json.loads((out_dir / "questions.json").read_text(encoding="utf-8"))
    assert payload["questionCount"] == 5
    assert payload["candidateBlocks"] == 6
    assert payload["dropped"] == 1
    assert payload["sections"] == ["體力處理操作"]
    assert payload["questions"][0]["correctAnswer"] == "a"
    assert "Saved 5 questions" in capsys.readouterr().out


def test_cli_reports_errors(tmp_path: Path, capsys) -> None:
    assert cli.main([str(tmp_path / "missing.txt"), "--output", str(tmp_path)]) == 1
    assert "Error" in capsys.readouterr().err


def test_cli_custom_marker(tmp_path: Path) -> None:
    source = tmp_path / "quiz.txt"
    source.write_text("1 Q\na. x\nb. y\nKey: b\n", encoding="utf-8")

    assert cli.main([str(source), "--output", str(tmp_path), "--answer-marker", "Key"]) == 0

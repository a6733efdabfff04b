"""JSON helpers shared by the stores, the loaders and the CLI export."""
import json
from pathlib import Path


def json_dump(payload: object) -> str:
    """Serialize object to pretty JSON string (question text stays readable)."""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def compact_dump(payload: object) -> str:
    """Serialize object to a single-line JSON string (stored values)."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def json_load(data: str | bytes) -> object:
    """Deserialize JSON text; raises ValueError on bad input."""
    return json.loads(data)


def read_json_file(path: Path, default: object) -> object:
    """Read and parse JSON file, return default if missing."""
    if not path.exists():
        return default
    return json_load(path.read_text(encoding="utf-8"))


def write_json_file(path: Path, payload: object) -> None:
    """Write object as pretty JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json_dump(payload), encoding="utf-8")

"""Utility modules."""
from api.utils.http_errors import to_http_exception
from api.utils.json_utils import (
    compact_dump,
    json_dump,
    json_load,
    read_json_file,
    write_json_file,
)

__all__ = [
    "compact_dump",
    "json_dump",
    "json_load",
    "read_json_file",
    "to_http_exception",
    "write_json_file",
]

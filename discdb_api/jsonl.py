# discdb_api/jsonl.py

"""Line-delimited JSON helpers for the dataset blob."""

import json
import logging
from typing import Any, Dict, Iterator, List

from .errors import ParseError

logger = logging.getLogger(__name__)


def _lines(text: str) -> Iterator[tuple]:
    for line_number, line in enumerate(text.split("\n"), start=1):
        line = line.strip()
        if line:
            yield line_number, line


def parse_strict(text: str) -> List[Dict[str, Any]]:
    """Parse every non-empty line as a JSON object; the first bad line raises ParseError."""
    entries = []
    for line_number, line in _lines(text):
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON on line {line_number}: {exc.msg}") from exc
        if not isinstance(obj, dict):
            raise ParseError(f"Non-object JSON on line {line_number}")
        entries.append(obj)
    return entries


def iter_lenient(text: str) -> Iterator[Dict[str, Any]]:
    """Yield JSON objects, skipping empty and invalid lines with a warning."""
    for line_number, line in _lines(text):
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Skipping invalid JSON line %d: %s", line_number, exc)
            continue
        if isinstance(obj, dict):
            yield obj
        else:
            logger.warning("Skipping non-object JSON line %d", line_number)


def dump_line(obj: Dict[str, Any]) -> str:
    """Serialize one record compactly, without the trailing newline."""
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def append_line(text: str, obj: Dict[str, Any]) -> str:
    """Return `text` with `obj` appended as the final line, newline-terminated."""
    head = text.strip()
    prefix = head + "\n" if head else ""
    return prefix + dump_line(obj) + "\n"

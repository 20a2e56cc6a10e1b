# discdb_api/discs.py

"""Lookup and append-only contribution over the disc dataset.

Every call works on a freshly fetched snapshot. The only concurrency control is
the content store's sha precondition: a contribution reads the blob and its sha,
checks for the label, and writes back conditioned on that sha. A lost race
surfaces as ConflictError; nothing here retries.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigError, ValidationError
from .jsonl import append_line, iter_lenient
from .models import REQUIRED_FIELDS, Contribution, DiscRecord
from .storage import ContentStore, SnapshotSource

logger = logging.getLogger(__name__)

FUZZY_TOLERANCE = 0.05
FUZZY_DISC_TYPE = "dvd"


def find_exact(entries: Iterable[Dict[str, Any]], label: str) -> Optional[Dict[str, Any]]:
    for e in entries:
        if e.get("disc_label") == label:
            return e
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def find_fuzzy(entries: Iterable[Dict[str, Any]], duration: int) -> Optional[Dict[str, Any]]:
    """First dvd whose duration is within 5% of `duration` (tolerance scales with the hint)."""
    if duration <= 0:
        return None
    tolerance = duration * FUZZY_TOLERANCE
    for e in entries:
        secs = e.get("duration_secs")
        if not _is_number(secs) or e.get("disc_type") != FUZZY_DISC_TYPE:
            continue
        if abs(secs - duration) <= tolerance:
            return e
    return None


def list_discs(source: SnapshotSource) -> Dict[str, Any]:
    entries = source.fetch_snapshot()
    return {"count": len(entries), "entries": entries}


def lookup_disc(label: Optional[str], duration: int, source: SnapshotSource) -> Dict[str, Any]:
    if not label:
        raise ValidationError("Missing label parameter")

    entries = source.fetch_snapshot()
    match = find_exact(entries, label)
    if match is None:
        match = find_fuzzy(entries, duration)

    if match is not None:
        return {"found": True, "entry": match}
    return {"found": False, "label": label, "duration": duration}


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_contribution(data: Any) -> Contribution:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise ValidationError(f"Missing required field: {field}", {"field": field})
    try:
        return Contribution.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "body"
        raise ValidationError(f"Invalid field {field}: {first['msg']}", {"field": field}) from e


def build_entry(contribution: Contribution, contributed_at: Optional[str] = None) -> DiscRecord:
    return DiscRecord(
        disc_label=contribution.disc_label,
        disc_type=contribution.disc_type,
        duration_secs=contribution.duration_secs,
        track_count=contribution.track_count or 0,
        title=contribution.title,
        year=contribution.year or None,
        tmdb_id=contribution.tmdb_id or None,
        contributed_at=contributed_at or utc_timestamp(),
    )


def has_label(text: str, label: str) -> bool:
    return any(e.get("disc_label") == label for e in iter_lenient(text))


def contribute_disc(data: Any, store: Optional[ContentStore]) -> Dict[str, Any]:
    contribution = validate_contribution(data)
    if store is None:
        raise ConfigError("Server not configured for contributions")

    entry = build_entry(contribution).model_dump()
    blob = store.read()

    if has_label(blob.text, entry["disc_label"]):
        logger.info("Disc %s already in database, nothing written", entry["disc_label"])
        return {"success": True, "message": "Entry already exists", "duplicate": True}

    message = f"Add disc: {entry['disc_label']} -> {entry['title']}"
    store.write(append_line(blob.text, entry), sha=blob.sha, message=message)
    logger.info("Committed disc %s (%s)", entry["disc_label"], entry["title"])
    return {"success": True, "message": "Contribution added", "entry": entry}

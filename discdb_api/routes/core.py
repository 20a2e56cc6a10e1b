import json
import re
from typing import Any, Optional
from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from ..config import Settings, load_settings
from ..discs import contribute_disc, list_discs, lookup_disc
from ..errors import ValidationError
from ..storage import ContentStore, SnapshotSource

router = APIRouter(tags=["discs"])

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def parse_duration(raw: Optional[str]) -> int:
    """Leading integer of `raw`; anything unparseable is 0 (fuzzy step skipped)."""
    m = _INT_PREFIX.match(raw or "")
    return int(m.group(1)) if m else 0


def get_snapshot_source(settings: Settings = Depends(load_settings)) -> SnapshotSource:
    return SnapshotSource.from_settings(settings)


def get_content_store(settings: Settings = Depends(load_settings)) -> Optional[ContentStore]:
    if not settings.github_token:
        return None
    return ContentStore.from_settings(settings)


@router.get("/")
def api_info(settings: Settings = Depends(load_settings)):
    return {
        "name": "RipForge Community Disc Database API",
        "endpoints": {
            "GET /db": "Get full database",
            "GET /lookup?label=X&duration=Y": "Look up a disc",
            "POST /contribute": "Submit a new disc mapping",
        },
        "repo": settings.repo_url,
    }


@router.get("/db")
def database(source: SnapshotSource = Depends(get_snapshot_source)):
    return list_discs(source)


@router.get("/lookup")
def lookup(label: Optional[str] = None, duration: Optional[str] = None,
           source: SnapshotSource = Depends(get_snapshot_source)):
    return lookup_disc(label, parse_duration(duration), source)


async def read_json_body(request: Request) -> Any:
    """Parse the body as JSON whatever Content-Type the client sent."""
    raw = await request.body()
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e


@router.post("/contribute")
async def contribute(payload: Any = Depends(read_json_body),
                     store: Optional[ContentStore] = Depends(get_content_store)):
    # requests is blocking; keep it off the event loop
    return await run_in_threadpool(contribute_disc, payload, store)

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = ("disc_label", "disc_type", "duration_secs", "title")


class Contribution(BaseModel):
    # unknown keys (including a client-sent contributed_at) are dropped
    model_config = ConfigDict(extra="ignore")

    disc_label: str
    disc_type: str
    duration_secs: int = Field(ge=0)
    title: str
    track_count: Optional[int] = Field(default=None, ge=0)
    year: Optional[int] = None
    tmdb_id: Optional[int] = None


class DiscRecord(BaseModel):
    disc_label: str
    disc_type: str
    duration_secs: int
    track_count: int = 0
    title: str
    year: Optional[int] = None
    tmdb_id: Optional[int] = None
    contributed_at: str

# discdb_api/config.py
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_REPO = "paul-tastic/ripforge-disc-db"
DEFAULT_FILE = "disc_database.jsonl"


@dataclass(frozen=True)
class Settings:
    repo: str = DEFAULT_REPO
    db_file: str = DEFAULT_FILE
    branch: str = "main"
    raw_base: str = "https://raw.githubusercontent.com"
    api_base: str = "https://api.github.com"
    github_token: Optional[str] = None
    user_agent: str = "RipForge-DiscDB-API"
    timeout: float = 15.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def raw_url(self) -> str:
        return f"{self.raw_base.rstrip('/')}/{self.repo}/{self.branch}/{self.db_file}"

    @property
    def contents_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/repos/{self.repo}/contents/{self.db_file}"

    @property
    def repo_url(self) -> str:
        return f"https://github.com/{self.repo}"


def load_settings() -> Settings:
    """Read settings from the environment. Called per request; nothing is cached."""
    return Settings(
        repo=os.getenv("DISCDB_REPO", DEFAULT_REPO),
        db_file=os.getenv("DISCDB_FILE", DEFAULT_FILE),
        branch=os.getenv("DISCDB_BRANCH", "main"),
        raw_base=os.getenv("DISCDB_RAW_BASE", "https://raw.githubusercontent.com"),
        api_base=os.getenv("DISCDB_API_BASE", "https://api.github.com"),
        github_token=os.getenv("GITHUB_TOKEN") or None,
        user_agent=os.getenv("DISCDB_USER_AGENT", "RipForge-DiscDB-API"),
        timeout=float(os.getenv("DISCDB_TIMEOUT", "15")),
        log_level=os.getenv("DISCDB_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("DISCDB_HOST", "0.0.0.0"),
        port=int(os.getenv("DISCDB_PORT", "8000")),
    )

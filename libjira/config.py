"""config.py – shared configuration, environment variables, and logging."""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logging.getLogger("urllib3").setLevel(logging.WARNING)

# ---------------------------------------------------------------------------
# Load .env (if present)
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")  # falls back gracefully if .env is missing
load_dotenv()  # then the working directory's .env, never overriding


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------
JIRA_SERVER: str = os.getenv("JIRA_SERVER", "")
JIRA_USER: str = os.getenv("JIRA_USER", "")
JIRA_PASSWORD: str = os.getenv("JIRA_PASSWORD", "")
JIRA_PROJECT: str = os.getenv("JIRA_PROJECT", "")
JIRA_NO_CHECK_SSL: bool = _env_flag("JIRA_NO_CHECK_SSL")

REQUEST_TIMEOUT: int = int(os.getenv("JIRA_TIMEOUT", "30"))


@dataclass(frozen=True)
class Options:
    """Everything a client or mapper call needs to know about the session.

    Passed explicitly to whoever needs it; there is no module-level copy.
    """

    user: str = ""
    passwd: str = ""
    server: str = ""  # bare host name, e.g. ``jira.example.com``
    no_check_ssl: bool = False
    verbose: bool = False
    project: str = ""
    timeout: int = REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, **overrides) -> "Options":
        """Build options from the environment, letting *overrides* win."""
        values = {
            "user": JIRA_USER,
            "passwd": JIRA_PASSWORD,
            "server": JIRA_SERVER,
            "no_check_ssl": JIRA_NO_CHECK_SSL,
            "project": JIRA_PROJECT,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def log_level(self) -> int:
        """Level used for chatty diagnostics (URLs, dropped elements)."""
        return logging.INFO if self.verbose else logging.DEBUG


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    stream=sys.stderr,
)
log = logging.getLogger("libjira")

__all__ = [
    "JIRA_SERVER",
    "JIRA_USER",
    "JIRA_PASSWORD",
    "JIRA_PROJECT",
    "JIRA_NO_CHECK_SSL",
    "REQUEST_TIMEOUT",
    "Options",
    "log",
]

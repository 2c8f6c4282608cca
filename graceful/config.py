# graceful/config.py
"""
Runtime settings, read from the environment after the project's .env file
has been loaded. Real environment variables win over .env values.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = "graceful.extensions"


@dataclass
class Settings:
    log_level: str = "INFO"
    log_file: Optional[str] = None
    history_limit: int = 0
    extensions: List[str] = field(default_factory=lambda: [DEFAULT_EXTENSIONS])
    prompt: str = "graceful> "


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load a .env file (project root by default). Returns True if one was read."""
    if env_path is None:
        env_path = Path(__file__).resolve().parent.parent / ".env"
    return load_dotenv(env_path, override=False)


def _int_setting(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d.", key, raw, default)
        return default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    extensions = [e.strip() for e in env.get("GRACEFUL_EXTENSIONS", DEFAULT_EXTENSIONS).split(",") if e.strip()]
    return Settings(
        log_level=(env.get("GRACEFUL_LOG_LEVEL") or "INFO").upper(),
        log_file=env.get("GRACEFUL_LOG_FILE") or None,
        history_limit=max(0, _int_setting(env, "GRACEFUL_HISTORY_LIMIT", 0)),
        extensions=extensions or [DEFAULT_EXTENSIONS],
        prompt=env.get("GRACEFUL_PROMPT") or "graceful> ",
    )

"""
Project root and `.env` handling.

The Google API key normally sits in a `.env` file next to `pyproject.toml`, while the API
and CLI can be launched from any directory. Two environment variables pin things down:

- `SAFETRAVEL_PROJECT_ROOT`: explicit project root (relative cache dirs resolve against it)
- `SAFETRAVEL_ENV_FILE`: explicit `.env` path; its directory also becomes the project root
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ROOT_MARKERS = (".env", ".git", "pyproject.toml")


def _find_marked_dir(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        if any((directory / marker).exists() for marker in ROOT_MARKERS):
            return directory
    return None


@lru_cache
def get_project_root() -> Path:
    """Locate the project root once per process."""
    explicit_root = os.getenv("SAFETRAVEL_PROJECT_ROOT")
    if explicit_root:
        return Path(explicit_root).expanduser().resolve()

    env_file = os.getenv("SAFETRAVEL_ENV_FILE")
    if env_file:
        return Path(env_file).expanduser().resolve().parent

    cwd = Path.cwd().resolve()
    return _find_marked_dir(cwd) or _find_marked_dir(Path(__file__).resolve().parent) or cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the project's `.env` (once); variables already in the environment win."""
    env_file = os.getenv("SAFETRAVEL_ENV_FILE")
    path = Path(env_file).expanduser().resolve() if env_file else get_project_root() / ".env"
    if not path.is_file():
        return None
    load_dotenv(dotenv_path=path, override=False)
    return path


def resolve_project_path(path: str | Path) -> Path:
    candidate = Path(path).expanduser()
    return candidate if candidate.is_absolute() else (get_project_root() / candidate).resolve()

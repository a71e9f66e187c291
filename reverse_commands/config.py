from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from .errors import UsageError
from .scanner import BUILTIN_CANDIDATES


DEFAULT_RC_FILE = "~/.bashrc"
DEFAULT_SAMPLE_SIZE = 10


@dataclass(frozen=True)
class Settings:
    rc_file: Path
    search_path: str
    sample_size: int = DEFAULT_SAMPLE_SIZE
    builtins: Tuple[str, ...] = BUILTIN_CANDIDATES

    def with_overrides(self, rc_file: Optional[str] = None, search_path: Optional[str] = None) -> "Settings":
        changes = {}
        if rc_file:
            changes["rc_file"] = Path(rc_file).expanduser()
        if search_path is not None:
            changes["search_path"] = search_path
        return replace(self, **changes) if changes else self


def load_settings(dotenv: bool = True) -> Settings:
    """Build settings from the environment, reading ``.env`` first.

    Env:
      - REVCMD_RC_FILE: startup file to edit (default ``~/.bashrc``)
      - REVCMD_PATH: colon-separated directories to scan (default ``$PATH``)
      - REVCMD_SAMPLE_SIZE: entries shown per summary list (default 10)
      - REVCMD_BUILTINS: space-separated builtins always offered as
        candidates (default ``cd exit pushd popd help``; empty for none)
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))  # read .env from the working directory

    rc_file = Path(os.getenv("REVCMD_RC_FILE") or DEFAULT_RC_FILE).expanduser()
    search_path = os.getenv("REVCMD_PATH", os.getenv("PATH", ""))

    raw_sample = os.getenv("REVCMD_SAMPLE_SIZE", str(DEFAULT_SAMPLE_SIZE))
    try:
        sample_size = int(raw_sample)
    except ValueError as exc:
        raise UsageError(f"REVCMD_SAMPLE_SIZE must be an integer, got {raw_sample!r}") from exc
    if sample_size < 0:
        raise UsageError("REVCMD_SAMPLE_SIZE must not be negative")

    raw_builtins = os.getenv("REVCMD_BUILTINS")
    builtins = BUILTIN_CANDIDATES if raw_builtins is None else tuple(raw_builtins.split())

    return Settings(rc_file=rc_file, search_path=search_path, sample_size=sample_size, builtins=builtins)

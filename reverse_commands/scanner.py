from __future__ import annotations

import logging
import os
from typing import Iterable, Iterator, List, Sequence


logger = logging.getLogger(__name__)


# Common builtins with no binary on PATH
BUILTIN_CANDIDATES = ("cd", "exit", "pushd", "popd", "help")


def split_search_path(search_path: str) -> List[str]:
    return [entry for entry in search_path.split(":") if entry]


def _executables(directory: str) -> Iterator[str]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        logger.debug("skipping %s: %s", directory, exc)
        return
    for entry in entries:
        try:
            if not entry.is_file(follow_symlinks=False):
                continue
        except OSError:
            continue
        if os.access(entry.path, os.X_OK):
            yield entry.name


def scan_candidates(
    directories: Sequence[str],
    builtins: Iterable[str] = BUILTIN_CANDIDATES,
) -> List[str]:
    """List executable names in search-path order, first directory wins.

    Only regular executable files (not symlinks) directly inside each
    directory count, in name order.
    Missing or unreadable directories are skipped. Builtins not already seen
    are appended last.
    """
    seen = set()
    candidates: List[str] = []
    for directory in directories:
        for name in _executables(directory):
            if name not in seen:
                seen.add(name)
                candidates.append(name)
    for name in builtins:
        if name not in seen:
            seen.add(name)
            candidates.append(name)
    logger.debug("found %d candidates in %d directories", len(candidates), len(directories))
    return candidates

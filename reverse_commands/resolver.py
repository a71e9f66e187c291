"""
Live lookups answering "does this name already mean something to the shell?".

The snapshot of shell-level names (builtins, keywords, aliases, functions) is
taken when a resolver is built, so build one per run.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import FrozenSet, Iterable, Optional


logger = logging.getLogger(__name__)


# Used when no bash is available to ask
BASH_BUILTINS: FrozenSet[str] = frozenset(
    """
    . : [ alias bg bind break builtin caller cd command compgen complete compopt
    continue declare dirs disown echo enable eval exec exit export false fc fg
    getopts hash help history jobs kill let local logout mapfile popd printf
    pushd pwd read readarray readonly return set shift shopt source suspend test
    times trap true type typeset ulimit umask unalias unset wait
    ! [[ ]] { } case do done elif else esac fi for function if in select then
    time until while coproc
    """.split()
)

COMPGEN_SCRIPT = "compgen -b; compgen -k; compgen -a; compgen -A function"


def shell_names(shell: str = "bash", timeout: float = 10.0) -> FrozenSet[str]:
    try:
        proc = subprocess.run(
            [shell, "-c", COMPGEN_SCRIPT],
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("cannot query %s for builtins (%s); using static list", shell, exc)
        return BASH_BUILTINS
    names = frozenset(line.strip() for line in proc.stdout.splitlines() if line.strip())
    return names or BASH_BUILTINS


def join_search_paths(*paths: Optional[str]) -> str:
    seen = []
    for path in paths:
        for entry in (path or "").split(os.pathsep):
            if entry and entry not in seen:
                seen.append(entry)
    return os.pathsep.join(seen)


class CommandResolver:
    """Resolve names against shell builtins and executables on ``search_path``."""

    def __init__(self, search_path: Optional[str] = None, shell_builtins: Optional[Iterable[str]] = None) -> None:
        self.search_path = join_search_paths(os.getenv("PATH"), search_path)
        self.shell_builtins = frozenset(shell_builtins) if shell_builtins is not None else shell_names()

    def resolves(self, name: str) -> bool:
        if not name:
            return False
        if name in self.shell_builtins:
            return True
        if os.sep in name:
            return False
        return shutil.which(name, path=self.search_path) is not None


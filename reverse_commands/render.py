from __future__ import annotations

import shlex
from datetime import datetime
from typing import Iterable, List, Optional

from .pipeline import WrapperSpec


MARKER_START = "# >>> reverse-all-commands START >>>"
MARKER_END = "# <<< reverse-all-commands END <<<"

TIMESTAMP_PREFIX = "# Reversed-command wrappers installed on: "

HEADER = """\
# To remove, run: reverse-commands uninstall
# Automatically generated block - do not edit manually unless you know what you're doing.
if [[ $- == *i* ]]; then
  shopt -s expand_aliases >/dev/null 2>&1 || true"""

FOOTER = "fi"


def timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now().astimezone()
    return now.isoformat(timespec="seconds")


def render_wrapper(spec: WrapperSpec) -> str:
    if spec.builtin:
        target = f"builtin {spec.original}"
    else:
        target = f"command {shlex.quote(spec.original)}"
    return (
        f'  if ! type "{spec.identifier}" >/dev/null 2>&1; then\n'
        f'    {spec.identifier}() {{ {target} "$@"; }}\n'
        f"  fi"
    )


def render_block(wrappers: Iterable[WrapperSpec], now: Optional[datetime] = None) -> str:
    """Render the marker-delimited block; no trailing newline."""
    lines: List[str] = [MARKER_START, TIMESTAMP_PREFIX + timestamp(now), HEADER]
    lines.extend(render_wrapper(spec) for spec in wrappers)
    lines.append(FOOTER)
    lines.append(MARKER_END)
    return "\n".join(lines)

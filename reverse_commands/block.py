"""
Owning a marker-delimited region inside a user's startup file.

Everything from the start marker through the end marker (and the blank
separator line install puts above it) belongs to us; every other byte is
passed through untouched. Text-level helpers are pure so they can be tested
without touching disk; :func:`install` and :func:`uninstall` add the file I/O
and commit with a single atomic rename.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .errors import BlockFileError
from .render import MARKER_END, MARKER_START


logger = logging.getLogger(__name__)

ENCODING = "utf-8"
ERRORS = "surrogateescape"  # round-trip undecodable bytes
NEW_FILE_MODE = 0o644

# Written as the block's second line when the file did not end in "\n"
NO_EOL_LINE = "# rc file had no final newline"


@dataclass(frozen=True)
class BlockSplit:
    prefix: str
    suffix: str
    found: int = 0

    @property
    def text(self) -> str:
        return self.prefix + self.suffix


@dataclass(frozen=True)
class InstallResult:
    path: Path
    replaced: bool


@dataclass(frozen=True)
class UninstallResult:
    path: Path
    removed: bool


def _split_lines(text: str) -> List[str]:
    # Split on "\n" only; str.splitlines would also break on \f, \x1c, ...
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _bare(line: str) -> str:
    return line.rstrip("\n").rstrip("\r")


def split_block(text: str) -> BlockSplit:
    """Split ``text`` around every marker span.

    ``prefix`` is what precedes the first start marker, ``suffix`` is all
    remaining content outside the spans. A start marker with no end marker
    owns the rest of the text. A trailing block carrying the no-newline line
    also takes back the final newline install added before it.
    """
    kept: List[str] = []
    prefix_len = None
    no_eol_at = None
    found = 0
    inside = False

    for line in _split_lines(text):
        bare = _bare(line)
        if inside:
            if bare == MARKER_END:
                inside = False
            elif bare == NO_EOL_LINE:
                no_eol_at = len(kept)
            continue
        if bare == MARKER_START:
            inside = True
            found += 1
            if kept and kept[-1] == "\n" and (prefix_len is None or len(kept) > prefix_len):
                kept.pop()
            if prefix_len is None:
                prefix_len = len(kept)
            continue
        kept.append(line)

    if not found:
        return BlockSplit(prefix=text, suffix="")
    if no_eol_at is not None and no_eol_at == len(kept) and kept and kept[-1].endswith("\n"):
        kept[-1] = kept[-1][:-1]
    return BlockSplit(
        prefix="".join(kept[:prefix_len]),
        suffix="".join(kept[prefix_len:]),
        found=found,
    )


def remove_block(text: str) -> str:
    return split_block(text).text


def append_block(text: str, block: str) -> str:
    """Replace any existing block in ``text`` with ``block`` at the end."""
    base = remove_block(text)
    block = block.rstrip("\n")
    if base and not base.endswith("\n"):
        base += "\n"
        first, _, rest = block.partition("\n")
        block = "\n".join(filter(None, (first, NO_EOL_LINE, rest)))
    separator = "\n" if base else ""
    return base + separator + block + "\n"


def read_text(path: Path) -> str:
    """Return the file's text, or "" if it does not exist."""
    try:
        with open(path, "r", encoding=ENCODING, errors=ERRORS, newline="") as fh:
            return fh.read()
    except FileNotFoundError:
        return ""
    except OSError as exc:
        raise BlockFileError(path, exc) from exc


def atomic_write(path: Path, text: str) -> None:
    """Write ``text`` to a temp file next to ``path`` and rename it over.

    The rename is the only commit point: on any failure the temp file is
    removed and ``path`` keeps its previous content. Mode bits carry over.
    """
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = NEW_FILE_MODE

    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, errors=ERRORS, newline="") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp)
        raise


def _target(path: Path) -> Path:
    # Write through symlinks so dotfile-manager links stay links
    return Path(os.path.realpath(path))


def has_block(path: Path) -> bool:
    return split_block(read_text(_target(Path(path)))).found > 0


def install(path: Path, block: str) -> InstallResult:
    target = _target(Path(path))
    current = read_text(target)
    replaced = split_block(current).found > 0
    try:
        atomic_write(target, append_block(current, block))
    except OSError as exc:
        raise BlockFileError(target, exc) from exc
    logger.debug("wrote block to %s (replaced=%s)", target, replaced)
    return InstallResult(path=Path(path), replaced=replaced)


def uninstall(path: Path) -> UninstallResult:
    target = _target(Path(path))
    current = read_text(target)
    split = split_block(current)
    if not split.found:
        return UninstallResult(path=Path(path), removed=False)
    try:
        atomic_write(target, split.text)
    except OSError as exc:
        raise BlockFileError(target, exc) from exc
    logger.debug("removed %d block(s) from %s", split.found, target)
    return UninstallResult(path=Path(path), removed=True)

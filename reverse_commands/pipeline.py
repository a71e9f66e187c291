from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from .names import reverse, sanitize
from .safety import Resolver, SafetyPolicy, SkipReason, classify


# Originals that are shell builtins and must be delegated with `builtin`
BUILTIN_DELEGATES = frozenset({"cd", "exit"})


@dataclass(frozen=True)
class WrapperSpec:
    original: str
    reversed: str
    identifier: str
    builtin: bool = False

    @classmethod
    def for_command(cls, original: str) -> "WrapperSpec":
        rev = reverse(original)
        return cls(
            original=original,
            reversed=rev,
            identifier=sanitize(rev),
            builtin=original in BUILTIN_DELEGATES,
        )


@dataclass(frozen=True)
class PipelineResult:
    wrappers: Tuple[WrapperSpec, ...]
    skipped: Tuple[Tuple[str, SkipReason], ...]

    def skip_counts(self) -> dict:
        counts: dict = {}
        for _name, reason in self.skipped:
            counts[reason] = counts.get(reason, 0) + 1
        return counts


def build_wrappers(candidates: Iterable[str], policy: SafetyPolicy, resolver: Resolver) -> PipelineResult:
    """Filter candidates and derive one wrapper per accepted name, in order.

    ``resolver`` is consulted live for every name; an identifier already
    taken by an earlier wrapper of the same run counts as a collision too.
    """
    wrappers: List[WrapperSpec] = []
    skipped: List[Tuple[str, SkipReason]] = []
    claimed: Set[str] = set()

    for name in candidates:
        reason = classify(name, policy, resolver)
        if reason is None:
            spec = WrapperSpec.for_command(name)
            if spec.identifier in claimed:
                reason = SkipReason.COLLISION
            else:
                claimed.add(spec.identifier)
                wrappers.append(spec)
                continue
        skipped.append((name, reason))

    return PipelineResult(wrappers=tuple(wrappers), skipped=tuple(skipped))

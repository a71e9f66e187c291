from __future__ import annotations

from typing import Dict, List, Tuple
from typing_extensions import TypedDict

from .pipeline import WrapperSpec
from .safety import SkipReason


class RunReport(TypedDict, total=False):
    # scan
    candidate_count: int

    # filter results
    wrappers: List[WrapperSpec]
    skipped: List[Tuple[str, SkipReason]]
    skip_counts: Dict[SkipReason, int]

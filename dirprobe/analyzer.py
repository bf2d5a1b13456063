"""Which statuses get reported, and how a reported line looks."""

import time
from typing import FrozenSet, Optional

from .models import ProbeOutcome

# 200 present, 301/302 moved (often a missing trailing slash), 401/403 gated
INTERESTING_STATUSES: FrozenSet[int] = frozenset({200, 301, 302, 401, 403})


def is_interesting_status(status: int) -> bool:
    return status in INTERESTING_STATUSES


def timestamp_seconds() -> str:
    return str(int(time.time()))


def format_line(url: str, outcome: ProbeOutcome, ts: Optional[str] = None) -> str:
    """
    Render one result line: timestamp, status, length and URL, plus the
    redirect target when there is one.

    [1712345678] 200 len=1234  https://example.com/admin
    [1712345679] 301 len=-  https://example.com/admin -> https://example.com/admin/
    """
    if ts is None:
        ts = timestamp_seconds()
    length = outcome.content_length if outcome.content_length is not None else "-"
    line = f"[{ts}] {outcome.status:>3} len={length}  {url}"
    if outcome.location is not None:
        line += f" -> {outcome.location}"
    return line

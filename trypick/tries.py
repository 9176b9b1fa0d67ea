"""Directory listing for the trial base path.

Produces one :class:`CandidateEntry` per visible subdirectory, with a
recency-weighted base score. Scan failures degrade to fewer (or zero) entries.
"""

from __future__ import annotations

import logging
import math
import os
import re
import time

from .search.fuzzy import CandidateEntry

logger = logging.getLogger(__name__)

DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")
DATE_PREFIX_BONUS = 2.0


def base_score(name: str, modified_at: float, now: float) -> float:
    """Return ``3 / sqrt(hours_since_modified + 1)`` plus the date-prefix bonus."""
    hours = max(0.0, (now - modified_at) / 3600.0)
    score = 3.0 / math.sqrt(hours + 1.0)
    if DATE_PREFIX_RE.match(name):
        score += DATE_PREFIX_BONUS
    return score


def load_candidates(base_path: str, now: float | None = None) -> list[CandidateEntry]:
    """List non-hidden directories directly under ``base_path``.

    Entries are returned in name order. An unreadable base directory yields an
    empty list.
    """
    if now is None:
        now = time.time()

    try:
        with os.scandir(base_path) as it:
            children = sorted(it, key=lambda child: child.name)
    except OSError as exc:
        logger.warning("cannot list %s: %s", base_path, exc)
        return []

    entries: list[CandidateEntry] = []
    for child in children:
        name = child.name
        if name.startswith("."):
            continue
        try:
            if not child.is_dir():
                continue
            modified_at = child.stat().st_mtime
        except OSError as exc:
            logger.debug("skipping %s: %s", child.path, exc)
            continue
        entries.append(
            CandidateEntry(
                text=name,
                basename=name,
                path=os.path.join(base_path, name),
                modified_at=modified_at,
                base_score=base_score(name, modified_at, now),
            )
        )

    logger.debug("loaded %d candidates from %s", len(entries), base_path)
    return entries

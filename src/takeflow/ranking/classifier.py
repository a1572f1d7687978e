"""Take-rank classification of pending recordings.

Recordings at or above the substantial-size threshold are treated as real takes;
smaller ones are assumed to be aborted or junk recordings. Among real takes the most
recent one is the best take and the earliest (the baseline) is kept as a good
fallback. Ranking is recomputed from the full file set on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from takeflow.config.models import SUBSTANTIAL_BYTES
from takeflow.incoming.models import PendingFile

TakeRank = Literal["best", "good"]


@dataclass(frozen=True, slots=True)
class TakeRanking:
    """Paths of the best and good takes; either may be ``None``."""

    best_path: Optional[str] = None
    good_path: Optional[str] = None

    def rank_of(self, path: str) -> Optional[TakeRank]:
        """Return the rank assigned to ``path``, or ``None`` when it is unranked."""
        if path == self.best_path:
            return "best"
        if path == self.good_path:
            return "good"
        return None


def classify(
    files: Sequence[PendingFile],
    *,
    substantial_bytes: int = SUBSTANTIAL_BYTES,
) -> TakeRanking:
    """Pick the best and good takes among ``files``.

    Args:
        files: Current pending recordings, in any order.
        substantial_bytes: Minimum size for a recording to count as a real take.

    Returns:
        TakeRanking: ``best_path`` and ``good_path`` for the set.
    """
    if not files:
        return TakeRanking()
    if len(files) == 1:
        return TakeRanking(best_path=files[0].path)

    # sorted() is stable, so equal timestamps keep their input order.
    by_time = sorted(files, key=lambda file: file.timestamp)
    substantial = [file for file in by_time if file.size >= substantial_bytes]

    if not substantial:
        largest = max(files, key=lambda file: file.size)
        return TakeRanking(best_path=largest.path)

    baseline = substantial[0]
    if len(substantial) == 1:
        return TakeRanking(best_path=baseline.path)

    return TakeRanking(best_path=substantial[-1].path, good_path=baseline.path)


__all__ = ["TakeRank", "TakeRanking", "classify"]

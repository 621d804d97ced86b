from typing import Dict, List, Sequence

from loguru import logger

from standings_kiosk.models.team import AnnotatedRecord, RankedRecord


class PositionTracker:
    """Remembers the last committed team -> position mapping.

    `annotate` is pure; the retained mapping only changes on `commit`, so a
    cycle that fails after annotating leaves the previous state in place.
    """

    def __init__(self):
        self._previous: Dict[str, int] = {}

    @property
    def previous_positions(self) -> Dict[str, int]:
        return dict(self._previous)

    def annotate(self, ranked: Sequence[RankedRecord]) -> List[AnnotatedRecord]:
        annotated: List[AnnotatedRecord] = []
        for record in ranked:
            previous = self._previous.get(record.team)
            delta = None
            if previous is not None and previous != record.position:
                delta = previous - record.position
            annotated.append(
                AnnotatedRecord.model_validate(
                    {
                        **record.model_dump(),
                        "previous_position": previous,
                        "position_delta": delta,
                    }
                )
            )
        return annotated

    def commit(self, records: Sequence[RankedRecord]) -> None:
        # Single assignment: readers never observe a half-built mapping
        self._previous = {record.team: record.position for record in records}
        logger.debug(f"Retained positions for {len(self._previous)} teams")

    def reconcile(self, ranked: Sequence[RankedRecord]) -> List[AnnotatedRecord]:
        annotated = self.annotate(ranked)
        self.commit(annotated)
        return annotated

    def reset(self) -> None:
        self._previous = {}

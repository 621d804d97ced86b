from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, model_validator

from .enums import DataSource
from .team import AnnotatedRecord


class StandingsSnapshot(BaseModel):
    """One refresh cycle's ordered, annotated standings."""

    records: List[AnnotatedRecord] = []
    source: DataSource
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _dense_unique_positions(self) -> "StandingsSnapshot":
        seen = set()
        for expected, record in enumerate(self.records, start=1):
            if record.position != expected:
                raise ValueError(
                    f"positions must be dense and ordered: {record.team} at {record.position}, expected {expected}"
                )
            if record.team in seen:
                raise ValueError(f"duplicate team in snapshot: {record.team}")
            seen.add(record.team)
        return self

    def __len__(self) -> int:
        return len(self.records)

    def teams(self) -> List[str]:
        return [record.team for record in self.records]

    def changed(self) -> List[AnnotatedRecord]:
        return [record for record in self.records if record.position_delta]

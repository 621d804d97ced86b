from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from standings_kiosk.parsing.records import format_record, win_pct

# Stands in for "unranked"; sorts after every real poll rank
NO_RANK = 999


class TeamRecord(BaseModel):
    """Canonical standings row produced by every source adapter."""

    model_config = ConfigDict(frozen=True)

    team: str
    conf_wins: int = Field(0, ge=0)
    conf_losses: int = Field(0, ge=0)
    overall_wins: int = Field(0, ge=0)
    overall_losses: int = Field(0, ge=0)
    ap_rank: int = Field(NO_RANK, ge=1, le=NO_RANK)
    net_rank: Optional[int] = Field(None, ge=1)

    @field_validator("team")
    @classmethod
    def _canonical_team(cls, value: str) -> str:
        cleaned = " ".join(value.split()).upper()
        if not cleaned:
            raise ValueError("team name must not be empty")
        return cleaned

    @computed_field  # type: ignore[misc]
    @property
    def conf_pct(self) -> float:
        return win_pct(self.conf_wins, self.conf_losses)

    @computed_field  # type: ignore[misc]
    @property
    def overall_pct(self) -> float:
        return win_pct(self.overall_wins, self.overall_losses)

    @property
    def conf(self) -> str:
        return format_record(self.conf_wins, self.conf_losses)

    @property
    def ovr(self) -> str:
        return format_record(self.overall_wins, self.overall_losses)

    @property
    def is_ranked(self) -> bool:
        return self.ap_rank < NO_RANK

    @property
    def has_net_rank(self) -> bool:
        return self.net_rank is not None


class RankedRecord(TeamRecord):
    """TeamRecord placed in rank order (1-based)."""

    position: int = Field(..., ge=1)


class AnnotatedRecord(RankedRecord):
    """RankedRecord with movement relative to the previous snapshot."""

    previous_position: Optional[int] = Field(None, ge=1)
    # Positive means the team moved toward first place
    position_delta: Optional[int] = None

    @property
    def moved_up(self) -> bool:
        return bool(self.position_delta and self.position_delta > 0)

    @property
    def moved_down(self) -> bool:
        return bool(self.position_delta and self.position_delta < 0)

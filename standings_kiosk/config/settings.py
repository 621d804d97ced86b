import logging
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from standings_kiosk.models.enums import DataSource


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Data sources
    data_source: DataSource = Field(
        DataSource.WARRENNOLAN,
        description="Primary standings source (warrennolan, simple_html, espn, csv).",
    )
    standings_url: str = Field(
        "https://www.warrennolan.com/basketball/2026/conference/Big-Ten",
        description="Extended standings table (records + NET).",
    )
    simple_standings_url: str = Field(
        "https://www.warrennolan.com/basketball/2026/conference/Big-Ten",
        description="Simple four-column standings table.",
    )
    poll_url: Optional[str] = Field(
        "https://www.ncaa.com/rankings/basketball-men/d1/associated-press",
        description="AP poll page used to fill in poll ranks.",
    )
    espn_api_url: str = Field(
        "https://site.api.espn.com/apis/site/v2/sports/basketball/mens-college-basketball/standings?group=7",
        description="Structured standings API.",
    )
    csv_url: str = Field(
        "https://docs.google.com/spreadsheets/d/1bOdPDPKf1QHUyayNgDToaCtu3k6_-bccnWLNqpyayvQ/export?format=csv&gid=1204601349",
        description="Published spreadsheet CSV export.",
    )
    enable_poll: bool = Field(
        True, description="Merge AP poll ranks from poll_url into the standings."
    )

    # Display
    favorite_team: Optional[str] = Field(
        "WISCONSIN",
        description="Team that sorts ahead of an otherwise tied competitor. Empty to disable.",
    )
    team_aliases: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra name aliases (variant -> canonical) for cross-source matching.",
    )

    # Timing
    refresh_interval_seconds: float = Field(900, gt=0)
    stale_threshold_seconds: float = Field(1800, gt=0)
    retry_base_delay_ms: int = Field(1000, gt=0)
    max_retry_delay_ms: int = Field(300_000, gt=0)
    position_change_duration_seconds: float = Field(5, ge=0)

    # HTTP
    request_timeout_seconds: float = Field(30.0, gt=0)
    user_agent: str = Field("Mozilla/5.0 (compatible; ConferenceStandingsKiosk/1.0)")
    cache_bust: bool = Field(
        True, description="Append a t=<epoch ms> query parameter to every fetch."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def favorite(self) -> Optional[str]:
        """Favorite team name uppercased, or None when unset."""
        if self.favorite_team and self.favorite_team.strip():
            return self.favorite_team.strip().upper()
        return None


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()

"""Configuration management via environment variables.

Reads from .env file (via pydantic-settings) with sensible defaults.
All values can be overridden via environment variables.

Optional:
    MAX_QUARTERS       — Quarterly points kept per series (default 40 = 10 years)
    MAX_TTM_POINTS     — TTM points kept per series (default 37)
    MAX_GROWTH_POINTS  — YoY growth points kept per series (default 36)
    DEFAULT_TAXONOMY   — Taxonomy used for bare concept keys (default us-gaap)
    FACTS_UNIT         — Unit array read from each concept (default USD)
    LOG_LEVEL          — Logging level for the CLI and MCP server
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Display windows (10 years of quarters, minus the history each derivation needs)
    max_quarters: int = 40
    max_ttm_points: int = 37
    max_growth_points: int = 36

    # Facts document scoping
    default_taxonomy: str = "us-gaap"
    facts_unit: str = "USD"

    log_level: str = "INFO"

    # .env values often arrive quoted or with trailing spaces
    @field_validator("default_taxonomy", "facts_unit", "log_level", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").strip()
        return v

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_config: Settings | None = None


def get_config() -> Settings:
    """Get or create the shared Settings singleton."""
    global _config
    if _config is None:
        _config = Settings()
    return _config

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ranking_params import RankingParams, get_ranking_params, load_ranking_params


class RankingSettings(BaseSettings):
    """Process settings read from the environment (prefix ``CALIBR_``) and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="CALIBR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    params_file: Optional[Path] = Field(
        default=None,
        description="YAML file overriding the default ranking parameters.",
    )
    log_level: str = Field(default="INFO")
    log_dir: Optional[Path] = Field(
        default=None,
        description="Directory for the rotating events log. Disabled when unset.",
    )
    events_retention_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)

    def ranking_params(self) -> RankingParams:
        if self.params_file is None:
            return get_ranking_params()
        return load_ranking_params(self.params_file)


def load_settings(**overrides: object) -> RankingSettings:
    return RankingSettings(**overrides)


__all__ = ["RankingSettings", "load_settings"]

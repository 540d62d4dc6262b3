"""Runtime settings and logging setup for the scheduling service."""

from __future__ import annotations

import logging
from datetime import tzinfo
from functools import lru_cache

from dateutil import tz
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="UNCONF_", extra="ignore")

    title: str = "Unconference Scheduler"
    # Zone used for slot labels, clash messages and parsing form start times
    display_timezone: str = "Europe/Berlin"
    log_level: str = "INFO"
    seed_data: bool = False

    @property
    def display_tz(self) -> tzinfo:
        zone = tz.gettz(self.display_timezone)
        if zone is None:
            raise ValueError(f"Unknown time zone: {self.display_timezone}")
        return zone


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

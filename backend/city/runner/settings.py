"""Autoplay runner configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from city.runner.autoplay import AutoPlayerStrategy


class CityRunnerSettings(BaseSettings):
    model_config = {"env_prefix": "CITY_"}

    games: int = Field(default=100, ge=1)
    seed: int = Field(default=0, ge=0)  # first game's seed, later games count up from it
    strategy: AutoPlayerStrategy = AutoPlayerStrategy.FIRST_LEGAL
    log_dir: str | None = None

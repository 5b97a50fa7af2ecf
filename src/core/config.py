"""
Runtime configuration.

Defaults live on the Settings model; every field can be overridden with a CHECKERS_<FIELD> environment variable.
"""

import logging
import os
from typing import Optional, Self

from pydantic import BaseModel, Field

from src.core.shared_types import Player

ENV_PREFIX = "CHECKERS_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    suggestion_url: Optional[str] = None
    suggestion_timeout: float = Field(default=10.0, gt=0)
    computer_player: Optional[Player] = Player.TWO
    random_seed: Optional[int] = None
    database_url: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Only the variables that are actually set override the defaults"""
        overrides = {
            name: os.environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in os.environ
        }
        # an empty value switches the computer opponent off
        if overrides.get("computer_player") == "":
            overrides["computer_player"] = None
        return cls.model_validate(overrides)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT
    )

"""Run configuration for the payments engine."""

import logging
import os
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Settings for a single processing run."""

    log_level: str = "WARNING"
    sort_output: bool = True

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables. Unknown log levels fall back to WARNING."""
        log_level = os.getenv("PAYMENTS_LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = "WARNING"

        return cls(
            log_level=log_level,
            sort_output=os.getenv("PAYMENTS_SORT_OUTPUT", "true").lower() == "true",
        )

"""
Pydantic models for library configuration.

Settings select the default scheduler backend and log level; WaitWindow
normalizes the wait argument of the time-based decorators.
"""

import logging
import math
import os
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SchedulerBackend(str, Enum):
    """Where deferred callbacks run by default."""
    THREADING = "threading"
    ASYNCIO = "asyncio"


class LibrarySettings(BaseModel):
    """Process-wide defaults for the time-based decorators and logging."""
    scheduler_backend: SchedulerBackend = Field(
        default=SchedulerBackend.THREADING,
        description="Scheduler used by delay/throttle when none is injected"
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level applied by configure_logging()"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Accept any standard logging level name, case-insensitively."""
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "LibrarySettings":
        """Build settings from UNDERBAR_* environment variables."""
        values = {}
        backend = os.environ.get('UNDERBAR_SCHEDULER_BACKEND')
        if backend:
            values['scheduler_backend'] = backend.strip().lower()
        level = os.environ.get('UNDERBAR_LOG_LEVEL')
        if level:
            values['log_level'] = level
        return cls(**values)


class WaitWindow(BaseModel):
    """A wait in milliseconds; negative waits mean "as soon as possible"."""
    wait_ms: float = Field(..., description="Wait in milliseconds")

    @field_validator('wait_ms')
    @classmethod
    def clamp_wait(cls, v):
        if math.isnan(v):
            raise ValueError("wait_ms must be a number")
        return max(0.0, v)

"""Settings — CLI flags, ``MICROWAVE_*`` env vars and code defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MICROWAVE_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

from microwave.core.formatting import DEFAULT_LOCALE

_DEFAULT_STATE_DIR = Path.home() / ".config" / "microwave"


class MicrowaveSettings(BaseSettings):
    """Unified settings for the microwave CLI.

    Attributes:
        state_dir: Directory holding the persisted ``oven.json``.
        tick_interval: Seconds between countdown ticks.
        locale: Language tag used to render error messages.
        user: Operator name recorded with each command.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MICROWAVE_",
    }

    state_dir: Path = _DEFAULT_STATE_DIR
    tick_interval: float = Field(default=1.0, gt=0)
    locale: str = DEFAULT_LOCALE
    user: str = Field(default="operator", min_length=1)

    verbose: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> MicrowaveSettings:
        """Build settings from CLI flags, letting unset (``None``) flags fall through."""
        return cls(**{key: value for key, value in cli_flags.items() if value is not None})

"""
Run configuration.

Plain dataclass defaults, optionally overridden from ``FRAMESCOPE_*``
environment variables and then from CLI options.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class RunConfig:
    """Configuration for one test run."""
    base_url: str = ""
    action_wait_ms: int = 250  # pause after click/submit/alert actions
    wait_interval_ms: int = 500  # polling interval; keep >= 250 ms
    default_timeout_ms: int = 10000
    headless: bool = False
    page_load_timeout_s: Optional[float] = None
    implicit_wait_s: Optional[float] = None

    @classmethod
    def from_env(cls, prefix: str = "FRAMESCOPE_", environ: Optional[Mapping[str, str]] = None) -> "RunConfig":
        """
        Build a config from environment variables.

        Recognised keys (with the default prefix): ``FRAMESCOPE_BASE_URL``,
        ``FRAMESCOPE_ACTION_WAIT_MS``, ``FRAMESCOPE_WAIT_INTERVAL_MS``,
        ``FRAMESCOPE_TIMEOUT_MS`` and ``FRAMESCOPE_HEADLESS``.

        Raises:
            ValueError: if a numeric variable is not an integer.
        """
        env = os.environ if environ is None else environ
        config = cls()

        config.base_url = env.get(f"{prefix}BASE_URL", config.base_url).strip()
        config.action_wait_ms = _int_var(env, f"{prefix}ACTION_WAIT_MS", config.action_wait_ms)
        config.wait_interval_ms = _int_var(env, f"{prefix}WAIT_INTERVAL_MS", config.wait_interval_ms)
        config.default_timeout_ms = _int_var(env, f"{prefix}TIMEOUT_MS", config.default_timeout_ms)

        headless = env.get(f"{prefix}HEADLESS")
        if headless is not None:
            config.headless = headless.strip().lower() in _TRUE_VALUES

        return config


def _int_var(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{key} must not be negative, got {value}")
    return value

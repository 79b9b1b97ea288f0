# utils/config.py - client configuration, optionally read from env
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class HttpUtilityConfig:
    token: Optional[str] = None
    date_format: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    base_url: Optional[str] = None

    @classmethod
    def from_env(cls, environ=None) -> "HttpUtilityConfig":
        """
        Read settings from the environment:
          HTTP_UTILITY_TOKEN, HTTP_UTILITY_DATE_FORMAT,
          HTTP_UTILITY_TIMEOUT (seconds), HTTP_UTILITY_BASE_URL
        Empty values count as unset.
        """
        env = os.environ if environ is None else environ
        return cls(
            token=env.get("HTTP_UTILITY_TOKEN") or None,
            date_format=env.get("HTTP_UTILITY_DATE_FORMAT") or None,
            timeout=float(env.get("HTTP_UTILITY_TIMEOUT") or DEFAULT_TIMEOUT),
            base_url=env.get("HTTP_UTILITY_BASE_URL") or None,
        )

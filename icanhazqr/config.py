"""Process configuration, read once from the environment at startup."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    adsense_client: str | None = None
    adsense_slot: str | None = None
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Ad identifiers are passed through untouched; they are validated by
        ``AdConfig.from_raw`` before they can influence any page.
        """
        env = os.environ if environ is None else environ
        return cls(
            adsense_client=env.get("ADSENSE_CLIENT") or None,
            adsense_slot=env.get("ADSENSE_SLOT") or None,
            log_level=env.get("ICANHAZQR_LOG_LEVEL", "INFO"),
            log_json=env.get("ICANHAZQR_LOG_JSON", "").strip().lower() in _TRUTHY,
        )

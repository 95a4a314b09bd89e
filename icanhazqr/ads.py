"""Advertising configuration: validate ad network identifiers before they reach markup."""

import re
from dataclasses import dataclass

from icanhazqr.logging import audit, get_logger

log = get_logger("ads")

_CLIENT_ID = re.compile(r"ca-pub-[0-9]{10,20}")
_SLOT_ID = re.compile(r"[0-9]{5,20}")

SCRIPT_SRC = "https://pagead2.googlesyndication.com/pagead/js/adsbygoogle.js"


def valid_client_id(value: str | None) -> bool:
    return bool(value) and _CLIENT_ID.fullmatch(value) is not None


def valid_slot_id(value: str | None) -> bool:
    return bool(value) and _SLOT_ID.fullmatch(value) is not None


@dataclass(frozen=True)
class AdConfig:
    """Ad identifiers that passed validation.

    Ads are all-or-nothing: a config with only one valid identifier renders
    exactly like an empty one.
    """
    client_id: str | None = None
    slot_id: str | None = None

    @property
    def enabled(self) -> bool:
        return self.client_id is not None and self.slot_id is not None

    @property
    def script_src(self) -> str | None:
        if not self.enabled:
            return None
        return f"{SCRIPT_SRC}?client={self.client_id}"

    @classmethod
    def from_raw(cls, client_id: str | None, slot_id: str | None) -> "AdConfig":
        """Keep each identifier only if it is syntactically valid."""
        config = cls(
            client_id=client_id if valid_client_id(client_id) else None,
            slot_id=slot_id if valid_slot_id(slot_id) else None,
        )
        if (client_id or slot_id) and not config.enabled:
            audit(
                "ads.disabled", logger=log,
                client_id_valid=config.client_id is not None,
                slot_id_valid=config.slot_id is not None,
            )
        return config

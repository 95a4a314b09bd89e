"""Option normalization: turn raw scale/border/ecc strings into a validated EncodingRequest."""

import re
from dataclasses import dataclass
from enum import Enum

MAX_DATA_LENGTH = 2048

DEFAULT_SCALE = 8
MIN_SCALE = 1
MAX_SCALE = 40

DEFAULT_BORDER = 4
MIN_BORDER = 0
MAX_BORDER = 20

_INTEGER = re.compile(r"[+-]?[0-9]{1,9}")


class ECCLevel(str, Enum):
    L = "L"  # 7%
    M = "M"  # 15%
    Q = "Q"  # 25%
    H = "H"  # 30%


DEFAULT_ECC = ECCLevel.M
ECC_NAMES = {level.value: level for level in ECCLevel}


@dataclass(frozen=True)
class RawOptions:
    """Option values as received, before any parsing. None means absent."""
    scale: str | None = None
    border: str | None = None
    ecc: str | None = None


@dataclass(frozen=True)
class EncodingRequest:
    """A fully validated request, ready for the codec."""
    payload: str
    scale: int = DEFAULT_SCALE
    border: int = DEFAULT_BORDER
    ecc: ECCLevel = DEFAULT_ECC


@dataclass(frozen=True)
class ValidationOutcome:
    """Either a valid request or the reason it was rejected, never both."""
    request: EncodingRequest | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.request is not None

    @classmethod
    def valid(cls, request: EncodingRequest) -> "ValidationOutcome":
        return cls(request=request)

    @classmethod
    def invalid(cls, error: str) -> "ValidationOutcome":
        return cls(error=error)


def parse_bounded_int(raw: str | None, default: int, low: int, high: int) -> int | None:
    """Parse a base-10 integer within [low, high].

    Absent or blank input yields ``default``. Returns None when the input is
    not a plain integer or falls outside the bounds.
    """
    if raw is None or not raw.strip():
        return default
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if value < low or value > high:
        return None
    return value


def parse_ecc(raw: str | None) -> ECCLevel | None:
    # An explicit empty string is rejected rather than defaulted.
    if raw is None:
        return DEFAULT_ECC
    return ECC_NAMES.get(raw.upper())


def normalize(payload: str, options: RawOptions) -> ValidationOutcome:
    """Validate options and payload; the first failing check is reported."""
    scale = parse_bounded_int(options.scale, DEFAULT_SCALE, MIN_SCALE, MAX_SCALE)
    if scale is None:
        return ValidationOutcome.invalid(
            f"scale must be an integer between {MIN_SCALE} and {MAX_SCALE}")

    border = parse_bounded_int(options.border, DEFAULT_BORDER, MIN_BORDER, MAX_BORDER)
    if border is None:
        return ValidationOutcome.invalid(
            f"border must be an integer between {MIN_BORDER} and {MAX_BORDER}")

    ecc = parse_ecc(options.ecc)
    if ecc is None:
        return ValidationOutcome.invalid(
            "ecc must be one of: " + ", ".join(level.value for level in ECCLevel))

    if len(payload) > MAX_DATA_LENGTH:
        return ValidationOutcome.invalid(
            f"Data too long. Max length is {MAX_DATA_LENGTH} characters.")

    return ValidationOutcome.valid(
        EncodingRequest(payload=payload, scale=scale, border=border, ecc=ecc))

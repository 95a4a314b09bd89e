"""Input extraction: pull the payload and raw options out of a /qr request.

GET requests read everything from the query string. POST requests pick a
strategy from the declared content type: a JSON object body, or the raw body
as text. Options in a JSON body override same-named query parameters.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from icanhazqr.options import RawOptions

MISSING_QUERY_DATA = "Missing required query parameter: data"
MISSING_BODY_DATA = "Missing data in request body"
INVALID_JSON = "Invalid JSON body"
JSON_NOT_OBJECT = "JSON body must be an object"


class BodyKind(Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class Extraction:
    """Payload and raw options from one request, or why they could not be read."""
    data: str | None = None
    options: RawOptions = RawOptions()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> "Extraction":
        return cls(error=error)


def body_kind(content_type: str | None) -> BodyKind:
    if content_type and "application/json" in content_type.lower():
        return BodyKind.JSON
    return BodyKind.TEXT


def query_options(query: Mapping[str, str]) -> RawOptions:
    return RawOptions(
        scale=query.get("scale"),
        border=query.get("border"),
        ecc=query.get("ecc"),
    )


def merge_options(body: RawOptions, query: RawOptions) -> RawOptions:
    """Combine body and query options; a value present in the body wins."""
    return RawOptions(
        scale=body.scale if body.scale is not None else query.scale,
        border=body.border if body.border is not None else query.border,
        ecc=body.ecc if body.ecc is not None else query.ecc,
    )


def extract_query(query: Mapping[str, str]) -> Extraction:
    data = query.get("data")
    if not data:
        return Extraction.failed(MISSING_QUERY_DATA)
    return Extraction(data=data, options=query_options(query))


def _number_or_string(value: object) -> str | None:
    # bool is an int subclass but never a valid option value here.
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    return None


def _from_json(body: bytes) -> tuple[str | None, RawOptions] | str:
    try:
        parsed = json.loads(body)
    except (ValueError, RecursionError):
        return INVALID_JSON
    if not isinstance(parsed, dict):
        return JSON_NOT_OBJECT

    data = parsed.get("data")
    ecc = parsed.get("ecc")
    options = RawOptions(
        scale=_number_or_string(parsed.get("scale")),
        border=_number_or_string(parsed.get("border")),
        ecc=ecc if isinstance(ecc, str) else None,
    )
    return (data if isinstance(data, str) else None), options


def _from_text(body: bytes) -> tuple[str | None, RawOptions]:
    return body.decode("utf-8", errors="replace"), RawOptions()


def extract_body(content_type: str | None, query: Mapping[str, str], body: bytes) -> Extraction:
    """Read a POST /qr request according to its declared content type."""
    if body_kind(content_type) is BodyKind.JSON:
        result = _from_json(body)
        if isinstance(result, str):
            return Extraction.failed(result)
        data, body_options = result
    else:
        data, body_options = _from_text(body)

    if not data:
        return Extraction.failed(MISSING_BODY_DATA)
    return Extraction(data=data, options=merge_options(body_options, query_options(query)))

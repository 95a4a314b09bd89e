"""SVG rendering of a validated EncodingRequest via segno."""

import io
from dataclasses import dataclass

import segno

from icanhazqr.logging import get_logger, trace
from icanhazqr.options import EncodingRequest

log = get_logger("codec")

SVG_TITLE = "Icanhazqrcode"
CODEC_FAILURE = "Unable to encode QR for the provided input and options"

FNV32_OFFSET = 0x811C9DC5
FNV32_PRIME = 0x01000193


class CodecError(Exception):
    """The payload could not be encoded with the requested options."""


def fnv1a_32(data: bytes) -> str:
    """32-bit FNV-1a of ``data`` as lowercase hex."""
    h = FNV32_OFFSET
    for byte in data:
        h ^= byte
        h = (h * FNV32_PRIME) & 0xFFFFFFFF
    return format(h, "x")


@dataclass(frozen=True)
class RenderedImage:
    body: bytes

    @property
    def fingerprint(self) -> str:
        return fnv1a_32(self.body)

    def __len__(self) -> int:
        return len(self.body)


@trace(expected=(CodecError,))
def render_svg(request: EncodingRequest) -> RenderedImage:
    """Encode ``request.payload`` as a standalone SVG document.

    Uses exactly the requested error correction level (no boosting) and
    always a regular QR symbol, never Micro QR. ``scale`` is the size of one
    module in pixels and ``border`` the quiet zone width in modules.

    Raises:
        CodecError: the payload exceeds the capacity for the level, or the
            encoder failed for any other reason.
    """
    try:
        qr = segno.make(
            request.payload,
            error=request.ecc.value,
            micro=False,
            boost_error=False,
        )
        buf = io.BytesIO()
        qr.save(
            buf,
            kind="svg",
            scale=request.scale,
            border=request.border,
            xmldecl=False,
            title=SVG_TITLE,
            nl=False,
        )
    except Exception as exc:
        raise CodecError(str(exc)) from exc

    return RenderedImage(body=buf.getvalue())

"""icanhazqr CLI: run the HTTP service or render a QR code to an SVG file."""

import argparse
import sys
from pathlib import Path

from icanhazqr.config import Settings
from icanhazqr.logging import audit, get_logger, setup_logging
from icanhazqr.options import ECCLevel, RawOptions, normalize

log = get_logger("cli")


def cmd_generate(args, settings: Settings) -> int:
    """Render DATA to an SVG file through the same validation as the HTTP API."""
    from icanhazqr.codec import CODEC_FAILURE, CodecError, render_svg

    outcome = normalize(args.data, RawOptions(scale=args.scale, border=args.border, ecc=args.ecc))
    if not outcome.ok:
        print(f"error: {outcome.error}", file=sys.stderr)
        return 1

    try:
        image = render_svg(outcome.request)
    except CodecError:
        print(f"error: {CODEC_FAILURE}", file=sys.stderr)
        return 1

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image.body)
    print(f"Generated: {output} ({len(image)} bytes, etag W/\"{image.fingerprint}\")")
    return 0


def cmd_serve(args, settings: Settings) -> int:
    """Start the HTTP service with Flask's built-in server."""
    from icanhazqr.app import create_app

    app = create_app(settings)
    print(f"Starting icanhazqr on http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="icanhazqr", description="icanhazqr: SVG QR code service")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--log-json", action="store_true", help="JSON logs on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    p_gen = subparsers.add_parser("generate", help="Render a QR code to an SVG file")
    p_gen.add_argument("data", help="Text or URL to encode")
    p_gen.add_argument("-o", "--output", default="qr.svg", help="Output file path")
    p_gen.add_argument("-s", "--scale", default=None, help="Module size in pixels (1-40, default 8)")
    p_gen.add_argument("-b", "--border", default=None, help="Quiet zone in modules (0-20, default 4)")
    p_gen.add_argument("-e", "--ecc", default=None, type=str.upper,
                       choices=[level.value for level in ECCLevel], help="Error correction level")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Start the HTTP service")
    p_serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    p_serve.add_argument("--port", type=int, default=8080, help="Port to listen on")
    p_serve.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()

    level = "DEBUG" if args.verbose else settings.log_level
    setup_logging(level=level, log_file=args.log_file, json_format=args.log_json or settings.log_json)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "generate": cmd_generate,
        "serve": cmd_serve,
    }
    status = commands[args.command](args, settings)
    audit("cli.done", logger=log, command=args.command, status=status)
    sys.exit(status)


if __name__ == "__main__":
    main()

"""
Command-line entry point.

Usage:
    imgproxy -server
    imgproxy -url https://example.com/a.jpg -f webp -w 300 -h 200

With ``-server`` (or without ``-url``) the HTTP server runs until stopped.
Otherwise a single resize is performed and the artifact path printed.
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from imgproxy.config import Settings, get_settings
from imgproxy.dependencies import create_orchestrator
from imgproxy.errors import AppError
from imgproxy.middleware.observability import setup_logging
from imgproxy.models.domain.request import ResizeRequest, ResizeResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Single-dash flags; ``-h`` is the height, so help is ``--help`` only."""
    parser = argparse.ArgumentParser(
        prog="imgproxy",
        description="On-demand image resizing proxy",
        add_help=False,
    )
    parser.add_argument("-url", default="", help="URL of the image to resize")
    parser.add_argument(
        "-f",
        dest="format",
        default="jpg",
        help="Output format (jpg, png, webp)",
    )
    parser.add_argument("-w", dest="width", type=int, default=0, help="Desired width")
    parser.add_argument("-h", dest="height", type=int, default=0, help="Desired height")
    parser.add_argument("-server", action="store_true", help="Run as HTTP server")
    parser.add_argument("-host", default=None, help="Host to bind to (default: from settings)")
    parser.add_argument(
        "-port",
        type=int,
        default=None,
        help="Port to bind to (default: from settings)",
    )
    parser.add_argument("--help", action="help", help="Show this message and exit")
    return parser


def run_server(settings: Settings, host: str | None = None, port: int | None = None) -> None:
    """Serve HTTP until interrupted. uvicorn exits non-zero if it cannot bind."""
    # imgproxy.main builds its module-level app on import
    from imgproxy.main import create_app

    host = host or settings.host
    port = port or settings.port
    logger.info(f"Running as HTTP server on {host}:{port}")

    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


async def resize_once(request: ResizeRequest, settings: Settings) -> ResizeResult:
    """Run a single pipeline call with a fresh orchestrator."""
    orchestrator = create_orchestrator(settings)
    try:
        return await orchestrator.run(request)
    finally:
        await orchestrator.fetcher.aclose()


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.server or not args.url:
        run_server(settings, host=args.host, port=args.port)
        return 0

    if args.width <= 0 or args.height <= 0:
        parser.print_usage(sys.stderr)
        return 1

    try:
        request = ResizeRequest.create(args.url, args.format, args.width, args.height)
        result = asyncio.run(resize_once(request, settings))
    except AppError as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info("Image resized and saved successfully")
    print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

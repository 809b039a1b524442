"""Standalone launcher for the latin1-ascii web API.

Starts uvicorn on the requested port, or on the first free one.

Usage:
    python -m latin1_ascii.web [--port N]
"""

from __future__ import annotations

import argparse
import logging
import socket
import sys

_log = logging.getLogger(__name__)


def find_free_port(start: int = 8400, end: int = 8500) -> int:
    """Return the first free TCP port in [start, end)."""
    for port in range(start, end):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(("127.0.0.1", port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"No free port between {start} and {end}.")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="latin1-ascii web server")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="TCP port to listen on (a free port is picked when omitted)",
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args(argv)

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed (pip install \"latin1-ascii[web]\").", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    port = args.port if args.port is not None else find_free_port()
    print(f"latin1-ascii API on http://{args.host}:{port}  (Ctrl+C to stop)")
    uvicorn.run("latin1_ascii.web.app:app", host=args.host, port=port, log_level=args.log_level)


if __name__ == "__main__":
    main()

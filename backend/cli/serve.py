#!/usr/bin/env python3
"""
Run the static file server.

Usage examples:

    python backend/cli/serve.py --root ./public
    python backend/cli/serve.py --profile express --port 9000

Flags override the HOST, PORT, STATIC_ROOT and STATIC_PROFILE environment
variables (a .env file is honoured).
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv  # noqa: E402

from app import DEFAULT_HOST, DEFAULT_PORT, create_app  # noqa: E402
from services.static_files import PROFILES  # noqa: E402

logger = logging.getLogger(__name__)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Serve files from a directory over HTTP"
    )
    parser.add_argument("--root", type=str, default=os.getenv("STATIC_ROOT"),
                        help="Directory to serve (default: current directory)")
    parser.add_argument("--host", type=str, default=os.getenv("HOST", DEFAULT_HOST),
                        help=f"Interface to bind (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", DEFAULT_PORT)),
                        help=f"Port to listen on (default: {DEFAULT_PORT})")
    parser.add_argument("--profile", type=str, default=os.getenv("STATIC_PROFILE", "basic"),
                        choices=sorted(PROFILES),
                        help="MIME table and routing rules to use")
    parser.add_argument("--debug", action="store_true",
                        default=bool(os.getenv("FLASK_DEBUG")),
                        help="Enable the Flask debugger and reloader")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    root = args.root or os.getcwd()
    if not os.path.isdir(root):
        raise SystemExit(f"Root directory does not exist or is not a directory: {root}")

    app = create_app(static_root=root, profile_name=args.profile)
    logger.info(f"Server running at http://{args.host}:{args.port}/")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()

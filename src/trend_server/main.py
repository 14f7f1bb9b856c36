"""
Main entry point for the Trend Segmentation Server.

Usage:
    python -m src.trend_server.main
    python -m src.trend_server.main --db ./data/stock.db --port 8080
"""

import argparse
import logging
from pathlib import Path

import uvicorn

from .api import app, set_store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Trend Segmentation Server - segment and rank price series"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="SQLite database with a weekly table (optional)"
    )

    args = parser.parse_args()

    if args.db:
        db_path = Path(args.db)
        if not db_path.exists():
            print(f"Error: Database not found: {db_path}")
            return 1
        set_store(str(db_path.resolve()))

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Run script for starting the Voice Gateway server with low-latency settings.

This script configures and starts the FastAPI server with WebSocket settings
suited to real-time audio streaming between browser clients and Gemini Live.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import os
import sys

import uvicorn

from voice_gateway.config.logging_config import configure_logging
from voice_gateway.config.settings import get_settings

settings = get_settings()
logger = configure_logging(settings.log_level)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Start the Voice Gateway server")
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to run the server on (default: 8000 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Host to bind the server to (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args()


def main():
    """Main entry point for starting the server."""
    args = parse_args()

    if not settings.gemini_api_key:
        logger.error("GEMINI_API_KEY environment variable not set")
        print("Error: GEMINI_API_KEY environment variable is required")
        sys.exit(1)

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    logger.info(f"Log level: {args.log_level}")
    logger.info(f"Data file: {settings.data_file}")

    uvicorn.run(
        "voice_gateway.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        # Use HTTP/1.1 for lower overhead than HTTP/2
        http="h11",
        # Disable access logs, we have our own logging
        access_log=False,
        reload=os.getenv("ENV", "production").lower() == "development",
    )


if __name__ == "__main__":
    main()

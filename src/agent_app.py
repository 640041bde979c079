"""
Banking Agent Application

This script starts the Agent Service API, the entry point for chat clients.
The agent answers banking questions using the mock banking tools.

Usage:
    python agent_app.py [--host HOST] [--port PORT] [--debug]
"""

import argparse
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main entry point for the banking agent application."""
    # Load environment variables before anything reads settings
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Start the Banking Agent API")
    parser.add_argument("--host", default=os.environ.get("AGENT_SERVICE_HOST", "127.0.0.1"), help="Interface to bind")
    parser.add_argument(
        "--port", type=int, default=int(os.environ.get("AGENT_SERVICE_PORT", 3000)), help="Port for the Agent Service"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("AGENT_SERVICE_DEBUG", "false").lower() == "true",
        help="Enable debug mode",
    )
    args = parser.parse_args(argv)

    from agent_service.api import start_agent_service

    try:
        start_agent_service(args.host, args.port, args.debug)
    except Exception as e:
        logger.error(f"Error starting Agent Service: {str(e)}")
        raise


if __name__ == "__main__":
    main()

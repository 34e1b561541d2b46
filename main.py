"""
HeatCheck - Main Entry Point

Starts the FastAPI server.

Usage:
    python main.py
"""
import logging
import uvicorn

from heatcheck.config import API_HOST, API_PORT, LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    logger.info(f"Starting HeatCheck API server on {API_HOST}:{API_PORT}...")
    try:
        from heatcheck.api.server import app
        uvicorn.run(app, host=API_HOST, port=API_PORT)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()

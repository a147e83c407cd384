"""
ExpoCRM Runner

Entry point for running the ExpoCRM API (`expocrm` console script or
`python -m expocrm.run`).
"""
import uvicorn
import logging
import os
from dotenv import load_dotenv

from .config import Config

# Load .env file
load_dotenv(Config.BASE_DIR / ".env")

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("expocrm")


def run():
    """Run the ExpoCRM API"""
    host = Config.API_HOST
    port = Config.API_PORT

    logger.info(f"Starting ExpoCRM API on {host}:{port}")

    uvicorn.run(
        "expocrm.app:app",
        host=host,
        port=port,
        reload=os.getenv("DEBUG", "false").lower() == "true"
    )


if __name__ == "__main__":
    run()

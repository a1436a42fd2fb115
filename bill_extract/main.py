"""Application entry point for the bill extraction API server."""

import uvicorn
from dotenv import load_dotenv

from bill_extract.api.app import app
from bill_extract.utils.config import load_config
from bill_extract.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    """Start the FastAPI application server."""
    load_dotenv()
    config = load_config()
    setup_logging(config.log_level)
    logger.info("Server is running on http://localhost:%d", config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()

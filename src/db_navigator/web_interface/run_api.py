# src/db_navigator/web_interface/run_api.py
import logging

import uvicorn

from db_navigator.config.api_config import ApiConfig
from db_navigator.config.logging_config import LoggingConfig

# Configure logging
logging_config = LoggingConfig()
logging_config.configure()
logger = logging.getLogger(__name__)


def run_api():
    """Run the FastAPI application."""
    api_config = ApiConfig()
    host = str(api_config.get('host', '0.0.0.0'))
    port = api_config.get_int('port', 5051)

    logger.info(f"Starting Database Navigator API on {host}:{port}")

    uvicorn.run(
        "db_navigator.web_interface.app:app",
        host=host,
        port=port,
        reload=bool(api_config.get('reload', False))
    )


if __name__ == "__main__":
    run_api()

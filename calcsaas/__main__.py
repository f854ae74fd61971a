"""
Run the API server:

  python -m calcsaas

Binds to HOST:PORT from settings (default 0.0.0.0:5000).
"""

import logging
import sys

import uvicorn

from calcsaas.core.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    logger.info("Server running on port %s", settings.PORT)
    logger.info("API endpoints available at http://localhost:%s%s", settings.PORT, settings.API_PREFIX)
    uvicorn.run("calcsaas.main:app", host=settings.HOST, port=settings.PORT, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())

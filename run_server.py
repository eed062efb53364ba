#!/usr/bin/env python3
"""
Todo agent server - runs the FastAPI HTTP app with uvicorn
"""
import os
import sys

# Fix encoding issues on servers with ASCII locale
os.environ.setdefault('PYTHONIOENCODING', 'utf-8')

import logging
import uvicorn
from todo_agent.config import settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    logger.info("Starting todo agent server...")
    logger.info(f"Python {sys.version}, encoding={sys.getdefaultencoding()}")
    logger.info(f"HTTP server will run on http://{settings.http_host}:{settings.http_port}")
    uvicorn.run(
        "todo_agent.main:create_app",
        factory=True,
        host=settings.http_host,
        port=settings.http_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

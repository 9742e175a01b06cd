#!/usr/bin/env python3
"""
Startup script for the Taskberry backend
This script starts the FastAPI server with proper configuration
"""

import logging

import uvicorn

from taskberry.config.settings import settings

logger = logging.getLogger(__name__)


def main():
    server = settings.SERVER

    logging.basicConfig(level=server['log_level'])
    logger.info("Starting Taskberry backend server...")
    logger.info(f"Host: {server['host']}  Port: {server['port']}  Reload: {server['reload']}")

    # Start the server
    uvicorn.run(
        "main:app",
        host=server['host'],
        port=server['port'],
        reload=server['reload'],
        log_level=server['log_level'].lower()
    )


if __name__ == "__main__":
    main()

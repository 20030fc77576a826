"""
__main__.py
===========
Serve the API with uvicorn: `python -m clinic_queue` or `clinic-queue`.
Bind address comes from CLINIC_HOST / CLINIC_PORT.
"""

import os

import uvicorn

from .logger import get_logger

logger = get_logger(__name__)

HOST = os.getenv("CLINIC_HOST", "127.0.0.1")
PORT = int(os.getenv("CLINIC_PORT", "8000"))


def main():
    logger.info("Starting clinic queue API on %s:%d", HOST, PORT)
    uvicorn.run("clinic_queue.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()

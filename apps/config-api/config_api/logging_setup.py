"""
File: logging_setup.py
Purpose: Configure structured JSON logging for production observability.
"""

import logging
from pythonjsonlogger import jsonlogger

def configure_logging(level: str = "INFO") -> None:
    """Configure root logger for JSON output and level from settings."""
    logger = logging.getLogger()
    logger.setLevel(level)
    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.handlers = [handler]

__all__ = [
    "Logger",
    "get_logger",
    "logger",
]

from src.utils.logging.default import Logger
from src.utils.logging.app_logger import get_logger, logger

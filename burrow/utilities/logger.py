"""
Logger module for burrow.

This module provides a centralized logger that can be imported throughout the package
without causing circular import issues. Call get_logger() at the point of logging rather than
importing the logger object, so that set_logger() takes effect everywhere.
"""

import logging

# Module-level logger
logger: logging.Logger = logging.getLogger('burrow')
logger.setLevel(logging.WARNING)  # Default to WARNING level to avoid spam

def get_logger() -> logging.Logger:
    """Returns the logger currently in use by the package."""
    return logger

def set_logger(custom_logger: logging.Logger) -> None:
    """Allow users to provide their own logger."""
    global logger
    logger = custom_logger

def set_log_level(level: int) -> None:
    """Set the logging level for the package.
    
    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, or logging.CRITICAL
    """
    logger.setLevel(level)

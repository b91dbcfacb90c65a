# ================================
# UTILS PACKAGE INITIALIZATION (utils/__init__.py)
# ================================

"""
Utils Package

Utility helpers for the admin console:
- Logging setup
- Error message extraction and description
- File upload / download helpers
"""

import logging

# ================================
# LOGGING UTILITIES
# ================================

def setup_logging(level: str = None) -> None:
    """
    Setup console logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL, DEBUG when settings.DEBUG is on.
    """
    from estate_admin.config import settings

    if level is None:
        level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

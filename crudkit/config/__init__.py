"""
Configuration module: settings, logging, constants.
"""

from crudkit.config.settings import settings, get_settings, Settings
from crudkit.config.logging import get_logger, setup_logging
from crudkit.config.constants import ErrorKind, GrpcCodes, Messages, Search

__all__ = [
    # settings
    "settings",
    "get_settings",
    "Settings",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "ErrorKind",
    "GrpcCodes",
    "Messages",
    "Search",
]

"""
Showreel Core
=============

Core utilities and shared functionality for Showreel modules.
"""

from .config import Config, get_config_value
from .database import Database
from .errors import ShowreelError, ValidationError, Unauthorized, NotFound, Conflict, UpstreamFailure
from .logging_service import LoggingService, db_log

__all__ = [
    'Config', 'get_config_value', 'Database', 'LoggingService', 'db_log',
    'ShowreelError', 'ValidationError', 'Unauthorized', 'NotFound', 'Conflict', 'UpstreamFailure',
]

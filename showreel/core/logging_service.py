"""
Centralized logging service for the Showreel application.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
import traceback
from datetime import datetime
from flask import request, has_request_context
from .database import Database
from .config import get_config_value

console = logging.getLogger('showreel')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _logs_db():
        return get_config_value('LOGS_DB')

    @staticmethod
    def _ensure_logs_table():
        """Ensure the app_logs table exists"""
        Database.execute_script(LoggingService._logs_db(), [
            """
            CREATE TABLE IF NOT EXISTS app_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                level TEXT NOT NULL,
                source TEXT NOT NULL,
                message TEXT NOT NULL,
                details TEXT,
                ip_address TEXT,
                user_agent TEXT,
                request_path TEXT,
                user_id TEXT
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON app_logs(timestamp DESC)",
            "CREATE INDEX IF NOT EXISTS idx_logs_level ON app_logs(level)",
        ])

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address, request.headers.get('User-Agent', ''), request.path

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the console and the app_logs table

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (projects, storage, auth, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        console.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        try:
            LoggingService._ensure_logs_table()
            ip_address, user_agent, request_path = LoggingService._get_request_context()

            with Database.connect(LoggingService._logs_db()) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, user_agent, request_path, user_id
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console logging if database fails
            console.warning("Logging service error: %s", e)
            if details:
                console.info("Details: %s", details)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log admin actions (login, create, delete, reorder)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def recent(limit=50, source=None):
        """Return the newest log rows, optionally for one source"""
        try:
            with Database.connect(LoggingService._logs_db()) as conn:
                cursor = conn.cursor()
                if source:
                    cursor.execute(
                        "SELECT * FROM app_logs WHERE source = ? ORDER BY id DESC LIMIT ?",
                        (source, limit)
                    )
                else:
                    cursor.execute("SELECT * FROM app_logs ORDER BY id DESC LIMIT ?", (limit,))
                return [dict(row) for row in cursor.fetchall()]
        except Exception as e:
            console.warning("Failed to read logs: %s", e)
            return []


def db_log(level, source, message, details=None):
    """Shortcut used by modules to write a persistent log entry"""
    LoggingService.log(level, source, message, details)

"""
Logging Configuration Module

This module configures queue-based logging for the calendar service and
mutes the per-request chatter of the HTTP client stack.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


class CalendarLoggingConfig:
    """Queue-based logging configuration for the calendar service."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None

    def setup_logging(self, debug: bool = False) -> None:
        """
        Route all records through a queue to a single stdout handler.

        Quarter loads complete in arbitrary order, so records are funneled
        through one listener to keep lines whole.

        Args:
            debug: Whether to enable debug logging
        """
        self.stop()
        self._log_queue = Queue()
        queue_handler = logging.handlers.QueueHandler(self._log_queue)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        if not debug:
            self._silence_noisy_libraries()

    def _silence_noisy_libraries(self) -> None:
        """Silence the HTTP client stack and asyncio debug output."""
        class _MuteHttpXFilter(logging.Filter):
            def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
                name = record.name or ""
                if name.startswith("httpx") or name.startswith("httpcore"):
                    return False
                msg = record.getMessage()
                if isinstance(msg, str) and msg.startswith("HTTP Request:"):
                    return False
                return True

        for handler in logging.getLogger().handlers:
            handler.addFilter(_MuteHttpXFilter())

        for name in ("httpx", "httpcore", "asyncio", "MARKDOWN"):
            logger = logging.getLogger(name)
            if name in ("httpx", "httpcore"):
                logger.setLevel(logging.CRITICAL)
                logger.disabled = True
                logger.handlers.clear()
                logger.addHandler(logging.NullHandler())
                logger.propagate = False
            else:
                logger.setLevel(logging.WARNING)

    def stop(self) -> None:
        """Stop the logging listener and cleanup."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        self._log_queue = None


# Global logging configuration instance
logging_config = CalendarLoggingConfig()


def setup_logging(debug: bool = False) -> None:
    """Setup queue-based logging configuration."""
    logging_config.setup_logging(debug)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path

from pos_analytics.config import config


class Logger:
    """Logging manager for POS Analytics.

    Every named logger writes to ``<directory>/<name>.log`` (rotated at
    ``max_size_mb``) and, when ``console_output`` is on, to the console.
    Report runs are recorded on the ``reports`` logger.
    """

    _instance = None
    _loggers = {}

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger if not already initialized."""
        if self._initialized:
            return

        self._root_handler = None
        self._apply_settings()

        self._initialized = True

    def _apply_settings(self):
        self._settings = config.log_config
        self._log_dir = Path(self._settings['directory'])
        self._log_dir.mkdir(parents=True, exist_ok=True)

        self._configure_root_logger()
        self._app_logger = self.get_logger('app')

    def reconfigure(self):
        """Re-read the LOGGING settings after the configuration was reloaded.

        Named loggers are rebuilt on their next get_logger call, writing to
        the new directory at the new level.
        """
        for named_logger in self._loggers.values():
            for handler in named_logger.handlers[:]:
                named_logger.removeHandler(handler)
                handler.close()
        self._loggers.clear()

        self._apply_settings()

    @property
    def level(self):
        return getattr(logging, self._settings['level'].upper(), logging.INFO)

    def _formatter(self):
        return logging.Formatter(self._settings['format'])

    def _console_handler(self):
        handler = logging.StreamHandler()
        handler.setFormatter(self._formatter())
        return handler

    def _file_handler(self, name):
        handler = logging.handlers.RotatingFileHandler(
            self._log_dir / f"{name}.log",
            maxBytes=self._settings['max_size_mb'] * 1024 * 1024,
            backupCount=self._settings['backup_count'],
            encoding='utf-8'
        )
        handler.setFormatter(self._formatter())
        return handler

    def _configure_root_logger(self):
        """Set the root level; module loggers (services, db) report through it."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)

        if self._root_handler is not None:
            root_logger.removeHandler(self._root_handler)
            self._root_handler = None

        if self._settings['console_output'] and not root_logger.handlers:
            self._root_handler = self._console_handler()
            root_logger.addHandler(self._root_handler)

    def get_logger(self, name):
        """Get a logger with its own log file.

        Args:
            name: Name of the logger and of its log file

        Returns:
            Configured logger instance
        """
        if name in self._loggers:
            return self._loggers[name]

        named_logger = logging.getLogger(name)
        named_logger.setLevel(self.level)

        # Loggers are reconfigured when the module is reloaded
        for handler in named_logger.handlers[:]:
            named_logger.removeHandler(handler)

        named_logger.addHandler(self._file_handler(name))
        if self._settings['console_output']:
            named_logger.addHandler(self._console_handler())

        named_logger.propagate = False

        self._loggers[name] = named_logger
        return named_logger

    def log_exception(self, logger_name, exception, message=None):
        """Log an exception with its stack trace.

        Args:
            logger_name: Logger name
            exception: Exception object
            message: Optional message to include
        """
        text = f"{message}: {str(exception)}" if message else str(exception)
        self.get_logger(logger_name).error(text, exc_info=exception)

    @property
    def app_logger(self):
        """Get the application logger."""
        return self._app_logger

    def report_start_log(self, report_name, filters=None):
        """Log the start of a report run.

        Args:
            report_name: Name of the report
            filters: Optional filters the report was requested with

        Returns:
            Dictionary to pass to report_end_log
        """
        log_info = {
            'report_name': report_name,
            'start_time': datetime.now(),
            'filters': filters
        }

        if filters:
            self.get_logger('reports').info(f"Starting report: {report_name} {filters}")
        else:
            self.get_logger('reports').info(f"Starting report: {report_name}")

        return log_info

    def report_end_log(self, log_info, success=True, row_count=None):
        """Log the end of a report run with its duration and size.

        Args:
            log_info: Dictionary returned by report_start_log
            success: Whether the report succeeded
            row_count: Optional number of records produced
        """
        report_logger = self.get_logger('reports')
        report_name = log_info.get('report_name', 'Unknown')
        seconds = (datetime.now() - log_info.get('start_time', datetime.now())).total_seconds()

        if not success:
            report_logger.error(f"Failed report: {report_name} after {seconds:.3f}s")
            return

        rows = f", {row_count} rows" if row_count is not None else ""
        report_logger.info(f"Completed report: {report_name} in {seconds:.3f}s{rows}")

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)

def log_exception(logger_name, exception, message=None):
    """Log an exception with stack trace."""
    logger.log_exception(logger_name, exception, message)

"""
Unified Logging System

Central logger factory and formatting for wgnet. Every module obtains its
logger through get_logger(__name__, component) so that console and file
output share one configuration, which the CLI sets once per invocation.

Features:
- Logger factory with a replaceable default configuration
- Multiple output formats (legacy, structured, json, simple)
- Optional file handler next to the console handler
- Context-aware logging (interface, operation) via LoggingContext
"""

import sys
import logging
import threading
from pathlib import Path
from typing import Dict, Optional
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
import json

# Thread-local storage for logger contexts
_logger_context = threading.local()


class LogFormat(Enum):
    """Supported log output formats"""
    LEGACY = "legacy"      # [2025-09-05 02:26:35] * INFO: wgnet: message
    STRUCTURED = "structured"  # [2025-09-05 02:26:35.150] [INFO] [component] message
    JSON = "json"          # {"timestamp": "...", "level": "INFO", "message": "..."}
    SIMPLE = "simple"      # INFO: message (for console)


@dataclass
class LoggerConfig:
    """Configuration for unified logger"""
    name: str
    level: int = logging.DEBUG

    # File output configuration
    file_path: Optional[Path] = None
    file_level: int = logging.DEBUG
    file_format: LogFormat = LogFormat.STRUCTURED

    # Console output configuration
    console_enabled: bool = True
    console_level: int = logging.INFO
    console_format: LogFormat = LogFormat.SIMPLE

    # Context and metadata
    component: Optional[str] = None
    interface_name: Optional[str] = None


class LoggerFormatter(logging.Formatter):
    """Custom formatter supporting multiple output formats"""

    def __init__(self, format_type: LogFormat, component: Optional[str] = None):
        self.format_type = format_type
        self.component = component
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(_logger_context, 'context', {})

        if self.format_type == LogFormat.LEGACY:
            return self._format_legacy(record, context)
        elif self.format_type == LogFormat.STRUCTURED:
            return self._format_structured(record, context)
        elif self.format_type == LogFormat.JSON:
            return self._format_json(record, context)
        elif self.format_type == LogFormat.SIMPLE:
            return self._format_simple(record, context)
        else:
            return super().format(record)

    def _format_legacy(self, record: logging.LogRecord, context: Dict) -> str:
        """Format: [2025-09-05 02:26:35] * INFO: wgnet: message"""
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        return f"[{timestamp}] * {record.levelname}: wgnet: {record.getMessage()}"

    def _format_structured(self, record: logging.LogRecord, context: Dict) -> str:
        """Format: [2025-09-05 02:26:35.150] [INFO] [component] message"""
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        component = self.component or context.get('component', record.name.split('.')[-1])

        message = record.getMessage()

        interface = context.get('interface')
        if interface:
            message = f"[{interface}] {message}"

        base_msg = f"[{timestamp}] [{record.levelname}] [{component}] {message}"

        if context.get('metadata'):
            context_json = json.dumps(context['metadata'], indent=2, default=str)
            base_msg += f"\n  Context: {context_json}"

        return base_msg

    def _format_json(self, record: logging.LogRecord, context: Dict) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'component': self.component or record.name,
            'message': record.getMessage(),
            'logger': record.name,
            'process': record.process
        }

        log_data.update(context)

        return json.dumps(log_data, ensure_ascii=False, default=str)

    def _format_simple(self, record: logging.LogRecord, context: Dict) -> str:
        """Format: INFO: message (for console)"""
        return f"{record.levelname}: {record.getMessage()}"


class ConsoleHandler(logging.StreamHandler):
    """Stream handler that always writes to the current sys.stderr"""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


class UnifiedLogger:
    """
    Logger wrapper with context support and multiple output formats.
    Keyword arguments passed to the log methods are attached as metadata.
    """

    def __init__(self, config: LoggerConfig):
        self.logger = logging.getLogger(config.name)
        self.reconfigure(config)

    def reconfigure(self, config: LoggerConfig) -> None:
        """Apply a new configuration, replacing existing handlers"""
        self.config = config
        self.logger.setLevel(config.level)

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        self.logger.propagate = False

        self._setup_handlers()

        self._component = config.component
        self._interface_name = config.interface_name

    def _setup_handlers(self):
        if self.config.file_path:
            file_handler = logging.FileHandler(
                self.config.file_path,
                mode='a',
                encoding='utf-8'
            )
            file_handler.setLevel(self.config.file_level)
            file_handler.setFormatter(LoggerFormatter(
                self.config.file_format,
                self.config.component
            ))
            self.logger.addHandler(file_handler)

        if self.config.console_enabled:
            console_handler = ConsoleHandler()
            console_handler.setLevel(self.config.console_level)
            console_handler.setFormatter(LoggerFormatter(
                self.config.console_format,
                self.config.component
            ))
            self.logger.addHandler(console_handler)

    def debug(self, message: str, **kwargs):
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log_with_context(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._log_with_context(logging.CRITICAL, message, **kwargs)

    def log(self, level: int, message: str, **kwargs):
        self._log_with_context(level, message, **kwargs)

    def _log_with_context(self, level: int, message: str, **kwargs):
        old_context = getattr(_logger_context, 'context', {}).copy()

        try:
            current_context = old_context.copy()
            if kwargs:
                current_context['metadata'] = kwargs

            if self._component:
                current_context['component'] = self._component
            if self._interface_name:
                current_context['interface'] = self._interface_name

            _logger_context.context = current_context

            self.logger.log(level, message)

        finally:
            _logger_context.context = old_context


class LoggerFactory:
    """
    Centralized logger factory.
    Loggers are cached per (name, component); changing the default
    configuration reconfigures every cached logger.
    """

    _loggers: Dict[str, UnifiedLogger] = {}
    _default_config: Optional[LoggerConfig] = None
    _lock = threading.RLock()

    @classmethod
    def _config_for(cls, name: str, component: Optional[str]) -> LoggerConfig:
        component = component or name.split('.')[-1]
        if cls._default_config is None:
            return LoggerConfig(name=name, component=component)
        return replace(cls._default_config, name=name, component=component)

    @classmethod
    def set_default_config(cls, config: LoggerConfig):
        """Set default logger configuration and apply it to existing loggers"""
        with cls._lock:
            cls._default_config = config
            for unified in cls._loggers.values():
                unified.reconfigure(cls._config_for(unified.config.name, unified.config.component))

    @classmethod
    def get_logger(
        cls,
        name: str,
        component: Optional[str] = None,
        config: Optional[LoggerConfig] = None
    ) -> UnifiedLogger:
        """
        Get or create a unified logger for a specific component.

        Args:
            name: Logger name (typically __name__)
            component: Component name for logging context
            config: Optional custom configuration

        Returns:
            UnifiedLogger instance
        """
        with cls._lock:
            cache_key = f"{name}:{component or ''}"

            if cache_key not in cls._loggers:
                cls._loggers[cache_key] = UnifiedLogger(config or cls._config_for(name, component))

            return cls._loggers[cache_key]

    @classmethod
    def reset(cls):
        """Reset logger factory (useful for testing)"""
        with cls._lock:
            cls._loggers.clear()
            cls._default_config = None


def get_logger(name: str, component: Optional[str] = None) -> UnifiedLogger:
    """Convenience function to get a logger - replaces logging.getLogger()"""
    return LoggerFactory.get_logger(name, component)


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None,
                      console_format: LogFormat = LogFormat.SIMPLE) -> LoggerConfig:
    """
    Configure console and file output for all wgnet loggers.

    Verbose mode lowers the console threshold to DEBUG; the file handler,
    when a log file is given, always records DEBUG and above.
    """
    config = LoggerConfig(
        name="wgnet",
        component="wgnet",
        file_path=Path(log_file) if log_file else None,
        file_format=LogFormat.STRUCTURED,
        console_level=logging.DEBUG if verbose else logging.INFO,
        console_format=console_format
    )
    LoggerFactory.set_default_config(config)
    return config


class LoggingContext:
    """Context manager for temporary logging context"""

    def __init__(self, **context_kwargs):
        self.context_kwargs = context_kwargs
        self.old_context = {}

    def __enter__(self):
        if hasattr(_logger_context, 'context'):
            self.old_context = _logger_context.context.copy()
        else:
            _logger_context.context = {}

        _logger_context.context.update(self.context_kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _logger_context.context = self.old_context


class InterfaceLoggingContext(LoggingContext):
    """Logging context bound to one tunnel interface and operation"""

    def __init__(self, interface_name: str, operation: str):
        super().__init__(interface=interface_name, operation=operation)

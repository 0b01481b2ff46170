# Path: catalog_validator/core/logger.py
"""
Catalog Validator Logger

Centralized logging configuration for the catalog validator.

Architecture:
- Component-based logging (core, engine, artifacts, cli)
- File and console output
- Configurable log levels
- IPO (Input-Process-Output) structured logging

Validation diagnostics are not reported through these loggers; they flow
into the error aggregator passed to the validator. Loggers carry the
operational trace only.
"""

import logging
from typing import Optional

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOGGER_ROOT,
    LOGGER_CORE,
    LOGGER_ENGINE,
    LOGGER_ARTIFACTS,
    LOGGER_CLI,
    ACTIVITY_LOG_FILENAME,
    ERROR_LOG_FILENAME,
)

_COMPONENT_LOGGERS = {
    'core': LOGGER_CORE,
    'engine': LOGGER_ENGINE,
    'artifacts': LOGGER_ARTIFACTS,
    'cli': LOGGER_CLI,
}


class CatalogValidatorLogger:
    """
    Centralized logger for the catalog validator.

    Provides component-specific loggers with unified configuration.

    Example:
        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Loading catalog catalog.xml")
        logger.info("[PROCESS] Resolving urn:example:v1")
        logger.info("[OUTPUT] Validation report produced")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize validator logger.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config
        self._configured = False

    def configure(
        self,
        log_level: Optional[str] = None,
        console: Optional[bool] = None,
        handler: Optional[logging.Handler] = None
    ) -> None:
        """
        Configure logging system for the catalog validator.

        Args:
            log_level: Overrides the configured level
            console: Overrides the configured console output flag
            handler: Console handler to install instead of a plain StreamHandler
        """
        config = self.config if self.config else ConfigLoader()

        log_dir = config.get('log_dir')
        level_name = log_level or config.get('log_level', 'INFO')
        console_output = config.get('log_console', True) if console is None else console
        level = getattr(logging, level_name.upper(), logging.INFO)

        logger = logging.getLogger(LOGGER_ROOT)
        logger.setLevel(level)
        logger.handlers.clear()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_dir / ACTIVITY_LOG_FILENAME)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            # Error-only log file
            error_handler = logging.FileHandler(log_dir / ERROR_LOG_FILENAME)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            logger.addHandler(error_handler)

        if console_output:
            console_handler = handler if handler else logging.StreamHandler()
            console_handler.setLevel(level)
            if handler is None:
                console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        self._configured = True

    def get_logger(self, name: str, component: str = 'core') -> logging.Logger:
        """
        Get logger for specific component.

        Loggers propagate to the package root logger; nothing is configured
        until configure() is called, so library use stays silent.

        Args:
            name: Module name (typically __name__)
            component: Component type ('core', 'engine', 'artifacts', 'cli')

        Returns:
            Logger instance
        """
        prefix = _COMPONENT_LOGGERS.get(component, LOGGER_ROOT)
        short_name = name.rsplit('.', 1)[-1]
        return logging.getLogger(f"{prefix}.{short_name}")


# Global logger instance
_validator_logger = CatalogValidatorLogger()


def get_logger(name: str, component: str = 'core') -> logging.Logger:
    """
    Get logger for a catalog validator component.

    Args:
        name: Module name (typically __name__)
        component: Component type ('core', 'engine', 'artifacts', 'cli')

    Returns:
        Logger instance

    Example:
        from catalog_validator.core.logger import get_logger

        logger = get_logger(__name__, 'engine')
        logger.info("[PROCESS] Validating document.xml")
    """
    return _validator_logger.get_logger(name, component)


def configure_logging(
    config: Optional[ConfigLoader] = None,
    log_level: Optional[str] = None,
    console: Optional[bool] = None,
    handler: Optional[logging.Handler] = None
) -> None:
    """
    Configure catalog validator logging.

    Call this once from an entry point.

    Args:
        config: Optional ConfigLoader instance
        log_level: Optional level override ('DEBUG', 'INFO', ...)
        console: Optional console output override
        handler: Optional console handler (the CLI passes a RichHandler)
    """
    global _validator_logger

    if config:
        _validator_logger = CatalogValidatorLogger(config)

    _validator_logger.configure(log_level=log_level, console=console, handler=handler)


__all__ = ['get_logger', 'configure_logging', 'CatalogValidatorLogger']

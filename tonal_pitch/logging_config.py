"""Centralized logging configuration for Tonal Pitch.

This module provides a consistent way to configure logging across the package.
The root logger is left to the application; only the loggers listed in
MODULE_LOG_LEVELS are configured.
The library itself never installs handlers on import; call ``setup_logging``
from an application to get console output.
"""

import logging
import sys
from typing import Optional, Dict

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "tonal_pitch": logging.INFO,
    "tonal_pitch.pitch": logging.INFO,
    # Conversion components
    "tonal_pitch.note_parser": logging.INFO,  # Set to DEBUG for every parsed note
    "tonal_pitch.tuning_systems": logging.INFO,
    "tonal_pitch.tuning_context": logging.INFO,
    "tonal_pitch.config": logging.INFO,
    "tonal_pitch.logging_config": logging.WARNING,  # Logging module itself should be quiet
    # Libraries/third-party
    "numpy": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None

# Cache for loggers to avoid duplicate setup
_logger_cache: Dict[str, logging.Logger] = {}


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'tonal_pitch' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("tonal_pitch"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("tonal_pitch").info("Logging configuration complete")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    The logger name must be explicitly listed in MODULE_LOG_LEVELS.

    Args:
        name: The full module name (e.g., 'tonal_pitch.note_parser')

    Returns:
        A configured logger instance

    Raises:
        ValueError: If the module name is not in MODULE_LOG_LEVELS
    """
    if name in _logger_cache:
        return _logger_cache[name]

    if name not in MODULE_LOG_LEVELS:
        raise ValueError(
            f"Logger '{name}' not found in MODULE_LOG_LEVELS. "
            "Please add it to the configuration."
        )

    logger = logging.getLogger(name)
    logger.setLevel(MODULE_LOG_LEVELS[name])

    # Only add handler if setup_logging has created one
    if _console_handler is not None and _console_handler not in logger.handlers:
        logger.addHandler(_console_handler)
        logger.propagate = False

    _logger_cache[name] = logger
    return logger

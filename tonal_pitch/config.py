"""Configuration loading for the tuning context."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .logging_config import get_logger
from .note_parser import parse_pitch_class
from .tuning_context import TuningContext, resolve_tuning_system, set_context
from .tuning_systems import validate_frequency

logger = get_logger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "reference_pitch": 440.0,
    "tuning_system": "equal",
    "tonic": None,
    "scale_type": "major",
}


def default_config_path() -> Path:
    # Use ~/.config/tonal_pitch by default
    home = os.path.expanduser("~")
    return Path(home) / ".config" / "tonal_pitch" / "tuning.json"


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load tuning configuration from a JSON file.

    Args:
        path: File to read, or None to use ~/.config/tonal_pitch/tuning.json

    Returns:
        Configuration dictionary. Keys missing from the file take their
        default value, and a missing or unreadable file gives the defaults.
    """
    config_file = Path(path) if path is not None else default_config_path()

    if not config_file.exists():
        logger.debug(f"No configuration at {config_file}, using defaults")
        return DEFAULT_CONFIG.copy()

    try:
        with open(config_file, "r") as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError(f"expected a JSON object, got {type(config).__name__}")
        logger.info(f"Loaded configuration from {config_file}")
    except (OSError, ValueError) as e:
        logger.error(f"Error loading configuration from {config_file}: {e}")
        return DEFAULT_CONFIG.copy()

    # Ensure all default keys are present
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    return config


def context_from_config(config: Dict[str, Any]) -> TuningContext:
    """Build a TuningContext from a configuration dictionary.

    Raises:
        PitchRangeError: If the reference pitch is not a positive number
        TuningContextError: If the tuning system name is not registered
        NoteFormatError: If the tonic is not a valid pitch class
    """
    merged = {**DEFAULT_CONFIG, **config}
    tonic = merged["tonic"]
    return TuningContext(
        reference_pitch=validate_frequency(merged["reference_pitch"], "Reference pitch"),
        tuning_system=resolve_tuning_system(merged["tuning_system"]),
        tonic=parse_pitch_class(tonic) if tonic is not None else None,
        scale_type=str(merged["scale_type"]),
    )


def apply_config(config: Dict[str, Any]) -> TuningContext:
    """Make a configuration the persistent context of the current thread or task."""
    ctx = context_from_config(config)
    set_context(ctx)
    logger.info(f"Applied tuning configuration: {ctx}")
    return ctx

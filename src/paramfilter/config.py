"""
Configuration Management for ParamFilter

Dataclass-based configuration for codec behaviour, schema validation and
logging, with dictionary and environment-variable constructors.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .core.codec import DEFAULT_SEPARATOR, FieldCodec


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class FilterConfig:
    """Complete paramfilter configuration"""
    array_separator: str = DEFAULT_SEPARATOR
    escape_array_items: bool = False
    allow_cycles: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        if not self.array_separator:
            raise ValueError("array_separator must not be empty")

    def make_codec(self) -> FieldCodec:
        return FieldCodec(separator=self.array_separator, escape=self.escape_array_items)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'FilterConfig':
        """Create configuration from dictionary"""
        config = cls()

        for key in ("array_separator", "escape_array_items", "allow_cycles"):
            if key in config_dict:
                setattr(config, key, config_dict[key])

        if "logging" in config_dict:
            for key, value in config_dict["logging"].items():
                if hasattr(config.logging, key):
                    setattr(config.logging, key, value)

        config.__post_init__()
        return config

    @classmethod
    def from_environment(cls) -> 'FilterConfig':
        """Create configuration from environment variables"""
        config = cls()

        if os.getenv('PARAMFILTER_ARRAY_SEPARATOR'):
            config.array_separator = os.getenv('PARAMFILTER_ARRAY_SEPARATOR')

        if os.getenv('PARAMFILTER_ESCAPE_ARRAYS'):
            config.escape_array_items = os.getenv('PARAMFILTER_ESCAPE_ARRAYS').lower() == 'true'

        if os.getenv('PARAMFILTER_ALLOW_CYCLES'):
            config.allow_cycles = os.getenv('PARAMFILTER_ALLOW_CYCLES').lower() == 'true'

        if os.getenv('PARAMFILTER_LOG_LEVEL'):
            config.logging.level = os.getenv('PARAMFILTER_LOG_LEVEL').upper()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "array_separator": self.array_separator,
            "escape_array_items": self.escape_array_items,
            "allow_cycles": self.allow_cycles,
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Attach a stream handler to the ``paramfilter`` logger."""
    config = config or get_config().logging
    logger = logging.getLogger("paramfilter")
    logger.setLevel(config.level)

    handler = next((h for h in logger.handlers if getattr(h, "_paramfilter", False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler._paramfilter = True
        logger.addHandler(handler)
    handler.setFormatter(logging.Formatter(config.format))
    return logger


# Global configuration management
_current_config: Optional[FilterConfig] = None

def set_config(config: FilterConfig):
    """Set the global configuration"""
    global _current_config
    _current_config = config

def get_config() -> FilterConfig:
    """Get the current global configuration"""
    global _current_config

    if _current_config is None:
        # Auto-create from environment if not set
        _current_config = FilterConfig.from_environment()

    return _current_config


__all__ = [
    "FilterConfig", "LoggingConfig",
    "configure_logging", "set_config", "get_config",
]

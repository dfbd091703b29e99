"""
Configuration for the Trellis extraction engine.

Collects the few knobs that callers tune per deployment into a single,
validated dataclass with sensible defaults.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..utils.logger import setup_logging
from .exceptions import ConfigurationError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ExtractionConfig:
    """
    Configuration for streaming extraction and generation steps.

    One instance may be shared by any number of concurrent generations;
    nothing in it is mutated during extraction.
    """

    # === Extraction ===
    streaming_validation: bool = False
    """Fail fast mid-stream when the first required field never opens"""

    # === Generation ===
    max_retries: int = 2
    """Re-prompt attempts after an extraction failure (GenerateStep)"""

    # === Logging Configuration ===
    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"""

    log_dir: Optional[str] = None
    """Directory for log files (None = no file logging)"""

    def __post_init__(self):
        """Validate configuration values after initialization."""
        if self.max_retries < 0:
            raise ConfigurationError(
                f"max_retries must be non-negative, got {self.max_retries}"
            )

        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level}"
            )

    def configure_logging(self) -> logging.Logger:
        """Apply ``log_level`` and ``log_dir`` to the ``trellis`` logger."""
        return setup_logging(self.log_level, self.log_dir)

    @classmethod
    def for_development(cls) -> 'ExtractionConfig':
        """Create configuration optimized for development."""
        return cls(
            streaming_validation=True,  # Surface prompt problems early
            max_retries=0,              # See the first failure
            log_level="DEBUG"
        )

    @classmethod
    def for_production(cls) -> 'ExtractionConfig':
        """Create configuration optimized for production."""
        return cls(
            streaming_validation=False,
            max_retries=3,
            log_level="WARNING"
        )

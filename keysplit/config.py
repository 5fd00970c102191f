"""
keysplit Configuration - Run settings with environment variable overrides.

Configuration precedence (highest to lowest):
1. Explicit arguments to functions/classes
2. Environment variables (KEYSPLIT_PATTERN, etc.), read from .env when present
3. Default values defined here
"""

import os
from dataclasses import dataclass
from typing import Optional, Union

from dotenv import load_dotenv

from keysplit.exceptions import ConfigurationError


COLLISION_POLICIES = ("suffix", "fail", "overwrite")
NO_MATCH_POLICIES = ("carry_forward", "fail")
PDF_METHODS = ("pymupdf", "pdfplumber")

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class SplitConfig:
    """
    Settings for a split run.

    Example:
        # Load from environment
        config = SplitConfig.from_env()

        # Or create with explicit values
        config = SplitConfig(
            pattern=r"^Account: (\\w+)$",
            dated=True,
            on_collision="fail"
        )
    """

    # Split mode
    pattern: Optional[str] = None
    key_group: Union[int, str] = 1

    # Output naming
    dated: bool = False
    date_format: str = "%Y%m%d"
    on_collision: str = "suffix"

    # Pages without a key
    no_match: str = "carry_forward"

    # PDF text extraction
    pdf_method: str = "pymupdf"

    # Diagnostics
    verbose: bool = False
    explicit: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "SplitConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - KEYSPLIT_PATTERN: Split pattern
        - KEYSPLIT_KEY_GROUP: Capture group index or name used as the key
        - KEYSPLIT_DATED: Prefix output names with today's date (1/0)
        - KEYSPLIT_ON_COLLISION: suffix, fail or overwrite
        - KEYSPLIT_NO_MATCH: carry_forward or fail
        - KEYSPLIT_PDF_METHOD: pymupdf or pdfplumber
        - KEYSPLIT_LOG_LEVEL: Logging level name
        """
        if dotenv:
            load_dotenv()
        return cls(
            pattern=os.getenv("KEYSPLIT_PATTERN") or None,
            key_group=parse_key_group(os.getenv("KEYSPLIT_KEY_GROUP", "1")),
            dated=os.getenv("KEYSPLIT_DATED", "").strip().lower() in _TRUTHY,
            on_collision=os.getenv("KEYSPLIT_ON_COLLISION", cls.on_collision),
            no_match=os.getenv("KEYSPLIT_NO_MATCH", cls.no_match),
            pdf_method=os.getenv("KEYSPLIT_PDF_METHOD", cls.pdf_method),
            log_level=os.getenv("KEYSPLIT_LOG_LEVEL", cls.log_level).upper(),
        )

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            ConfigurationError: If any option has an unknown value
        """
        if self.on_collision not in COLLISION_POLICIES:
            raise ConfigurationError(
                f"Unknown collision policy: {self.on_collision}. "
                f"Available: {', '.join(COLLISION_POLICIES)}"
            )
        if self.no_match not in NO_MATCH_POLICIES:
            raise ConfigurationError(
                f"Unknown no-match policy: {self.no_match}. "
                f"Available: {', '.join(NO_MATCH_POLICIES)}"
            )
        if self.pdf_method not in PDF_METHODS:
            raise ConfigurationError(
                f"Unknown PDF method: {self.pdf_method}. "
                f"Available: {', '.join(PDF_METHODS)}"
            )
        if isinstance(self.key_group, int) and self.key_group < 1:
            raise ConfigurationError(
                f"Key group must be 1 or greater, got {self.key_group}"
            )


def parse_key_group(value: Union[int, str]) -> Union[int, str]:
    """Turn "2" into 2, leave group names like "account" alone."""
    if isinstance(value, int):
        return value
    value = value.strip()
    if value.isdigit():
        return int(value)
    if not value:
        raise ConfigurationError("Key group must not be empty")
    return value


# Global default config instance
_default_config: Optional[SplitConfig] = None


def get_config() -> SplitConfig:
    """Get the global default configuration, loading from env if needed."""
    global _default_config
    if _default_config is None:
        _default_config = SplitConfig.from_env()
    return _default_config


def set_config(config: SplitConfig) -> None:
    """Set the global default configuration."""
    global _default_config
    _default_config = config

"""
mdfence Configuration
=====================

Loads and manages configuration from mdfence.yaml with environment variable
overrides.

Example mdfence.yaml:

    directives:
      patterns: ['eslint\\b', 'global\\s']
      skip: eslint-skip
      comment_template: '/*{}*/'
    processor:
      materialize_code_blocks: false
      temp_dir: null
    unsatisfiable_rules: [eol-last, unicode-bom]
    language_extensions:
      tsx: tsx
    logging:
      level: WARNING

Author: mdfence maintainers | 2026-10-19
"""

import os
import yaml
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mdfence.directives import (
    DEFAULT_COMMENT_TEMPLATE,
    DEFAULT_DIRECTIVE_PATTERNS,
    DEFAULT_SKIP_DIRECTIVE,
    DirectiveLexicon,
)
from mdfence.fragments import LANGUAGE_EXTENSIONS
from mdfence.translate import UNSATISFIABLE_RULES

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "mdfence.yaml"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ProcessorOptionsError(ValueError):
    """Raised when a processor option has the wrong type."""
    pass


# =============================================================================
# Configuration Data Classes
# =============================================================================

@dataclass
class DirectiveConfig:
    """Directive comment lexicon."""
    patterns: List[str] = field(default_factory=lambda: list(DEFAULT_DIRECTIVE_PATTERNS))
    skip: str = DEFAULT_SKIP_DIRECTIVE
    comment_template: str = DEFAULT_COMMENT_TEMPLATE

    def lexicon(self) -> DirectiveLexicon:
        return DirectiveLexicon(
            patterns=tuple(self.patterns),
            skip=self.skip,
            comment_template=self.comment_template,
        )


@dataclass
class ProcessorOptions:
    """Runtime options of the Markdown processor."""
    materialize_code_blocks: bool = False
    temp_dir: Optional[str] = None

    def __post_init__(self):
        validate_options(
            materialize_code_blocks=self.materialize_code_blocks,
            temp_dir=self.temp_dir,
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    format: str = "%(levelname)s %(name)s: %(message)s"


@dataclass
class MDFenceConfig:
    """Root configuration container."""
    directives: DirectiveConfig = field(default_factory=DirectiveConfig)
    processor: ProcessorOptions = field(default_factory=ProcessorOptions)
    unsatisfiable_rules: List[str] = field(default_factory=lambda: sorted(UNSATISFIABLE_RULES))
    language_extensions: Dict[str, str] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def extension_table(self) -> Dict[str, str]:
        """Built-in language extensions merged with configured ones."""
        return {**LANGUAGE_EXTENSIONS, **self.language_extensions}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directives": {
                "patterns": list(self.directives.patterns),
                "skip": self.directives.skip,
                "comment_template": self.directives.comment_template,
            },
            "processor": {
                "materialize_code_blocks": self.processor.materialize_code_blocks,
                "temp_dir": self.processor.temp_dir,
            },
            "unsatisfiable_rules": list(self.unsatisfiable_rules),
            "language_extensions": dict(self.language_extensions),
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MDFenceConfig":
        config = cls()
        directives_d = d.get("directives") or {}
        processor_d = d.get("processor") or {}
        logging_d = d.get("logging") or {}

        config.directives = DirectiveConfig(
            patterns=list(directives_d.get("patterns", config.directives.patterns)),
            skip=directives_d.get("skip", config.directives.skip),
            comment_template=directives_d.get("comment_template", config.directives.comment_template),
        )
        config.processor = ProcessorOptions(
            materialize_code_blocks=processor_d.get(
                "materialize_code_blocks", config.processor.materialize_code_blocks),
            temp_dir=processor_d.get("temp_dir", config.processor.temp_dir),
        )
        config.unsatisfiable_rules = list(d.get("unsatisfiable_rules", config.unsatisfiable_rules))
        config.language_extensions = dict(d.get("language_extensions") or {})
        config.logging = LoggingConfig(
            level=str(logging_d.get("level", config.logging.level)).upper(),
            format=logging_d.get("format", config.logging.format),
        )
        return config


def validate_options(**options: Any) -> None:
    """
    Check processor option types.

    Raises:
        ProcessorOptionsError: If an option has the wrong type
    """
    if "materialize_code_blocks" in options:
        value = options["materialize_code_blocks"]
        if value is not None and not isinstance(value, bool):
            raise ProcessorOptionsError(
                "Invalid markdown processor option: `materialize_code_blocks` must be a boolean."
            )
    if "temp_dir" in options:
        value = options["temp_dir"]
        if value is not None and not isinstance(value, (str, os.PathLike)):
            raise ProcessorOptionsError(
                "Invalid markdown processor option: `temp_dir` must be a string when provided."
            )


# =============================================================================
# Configuration Loader
# =============================================================================

def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find mdfence.yaml by searching upward from start_path.

    Search order:
    1. start_path / mdfence.yaml
    2. start_path / .mdfence / mdfence.yaml
    3. Parent directories (recursive)
    4. ~/.config/mdfence/mdfence.yaml

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to config file or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()
    for _ in range(10):  # Max 10 levels up
        for candidate in (current / CONFIG_FILENAME, current / ".mdfence" / CONFIG_FILENAME):
            if candidate.exists():
                return candidate

        parent = current.parent
        if parent == current:
            break
        current = parent

    user_config = Path.home() / ".config" / "mdfence" / CONFIG_FILENAME
    if user_config.exists():
        return user_config

    return None


def load_config(config_path: Optional[Path] = None) -> MDFenceConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Environment variables override config file values:
    - MDFENCE_MATERIALIZE -> processor.materialize_code_blocks
    - MDFENCE_TEMP_DIR -> processor.temp_dir
    - MDFENCE_LOG_LEVEL -> logging.level
    - MDFENCE_UNSATISFIABLE_RULES -> unsatisfiable_rules (comma-separated)

    Args:
        config_path: Path to config file (auto-detected if None)

    Returns:
        MDFenceConfig instance
    """
    config = MDFenceConfig()

    if config_path is None:
        config_path = find_config_file()

    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            config = MDFenceConfig.from_dict(data)
        except (OSError, yaml.YAMLError, ProcessorOptionsError, AttributeError, TypeError) as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
            config = MDFenceConfig()
    else:
        logger.info("No config file found, using defaults")

    config = _apply_env_overrides(config)
    _validate_config(config)
    return config


def _apply_env_overrides(config: MDFenceConfig) -> MDFenceConfig:
    """Apply environment variable overrides to config."""

    if os.environ.get("MDFENCE_MATERIALIZE"):
        config.processor.materialize_code_blocks = (
            os.environ["MDFENCE_MATERIALIZE"].lower() in ("true", "1", "yes")
        )

    if os.environ.get("MDFENCE_TEMP_DIR"):
        config.processor.temp_dir = os.environ["MDFENCE_TEMP_DIR"]

    if os.environ.get("MDFENCE_LOG_LEVEL"):
        config.logging.level = os.environ["MDFENCE_LOG_LEVEL"].upper()

    if os.environ.get("MDFENCE_UNSATISFIABLE_RULES"):
        config.unsatisfiable_rules = [
            rule.strip()
            for rule in os.environ["MDFENCE_UNSATISFIABLE_RULES"].split(",")
            if rule.strip()
        ]

    return config


def _validate_config(config: MDFenceConfig) -> None:
    """Validate configuration and log warnings."""

    if config.logging.level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown log level '{config.logging.level}', defaulting to 'WARNING'")
        config.logging.level = "WARNING"

    if "{}" not in config.directives.comment_template:
        logger.warning(
            f"Comment template '{config.directives.comment_template}' has no '{{}}' "
            f"placeholder, defaulting to '{DEFAULT_COMMENT_TEMPLATE}'"
        )
        config.directives.comment_template = DEFAULT_COMMENT_TEMPLATE


def save_config(config: MDFenceConfig, path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: MDFenceConfig instance
        path: Output path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to: {path}")


# =============================================================================
# Global Config Instance
# =============================================================================

_global_config: Optional[MDFenceConfig] = None


def get_config() -> MDFenceConfig:
    """Get the global configuration instance (lazy-loaded)."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reload_config(config_path: Optional[Path] = None) -> MDFenceConfig:
    """Reload configuration from file."""
    global _global_config
    _global_config = load_config(config_path)
    return _global_config

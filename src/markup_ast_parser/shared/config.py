"""Configuration for markup parsing.

``ParserConfig`` is an immutable dataclass validated on construction. Presets
cover the common cases; ``override`` derives a modified copy and the
``to_json``/``from_json`` pair lets the CLI load settings from disk.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .logging import LOG_LEVELS

DEFAULT_MAX_DEPTH = 256

# Each nesting level costs one interpreter frame; stay under the default
# recursion limit with room for the caller's stack
MAX_SUPPORTED_DEPTH = 800


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Settings for a markup parse.

    Attributes:
        max_depth: Maximum tag nesting depth, the root being depth 1
        max_input_length: Maximum number of input characters, or None
        allow_trailing_content: Ignore non-whitespace text after the root node
        track_memory: Sample process memory with psutil around each parse
        logging_level: Level used when the CLI configures logging
        correlation_id: Correlation ID attached to logs and diagnostics
        name: Preset name
        description: Preset description
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    max_input_length: Optional[int] = None
    allow_trailing_content: bool = True
    track_memory: bool = True
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.max_depth, int) or self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0", field_name="max_depth"
            )
        if self.max_depth > MAX_SUPPORTED_DEPTH:
            raise ConfigValidationError(
                f"max_depth must be <= {MAX_SUPPORTED_DEPTH}",
                field_name="max_depth",
                suggestions=["Flatten the document", f"Use max_depth={MAX_SUPPORTED_DEPTH}"],
            )
        if self.max_input_length is not None and self.max_input_length <= 0:
            raise ConfigValidationError(
                "max_input_length must be > 0 or None", field_name="max_input_length"
            )
        if self.logging_level not in LOG_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {list(LOG_LEVELS)}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig().override(max_depth=32)
            >>> config.max_depth
            32
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], preset: Optional[str] = None) -> "ParserConfig":
        """Create configuration from dictionary, ignoring unknown keys.

        The starting preset is ``preset`` if given, else the dictionary's
        ``preset`` key; the remaining keys are applied on top of it.
        """
        data = dict(data)
        file_preset = data.pop("preset", None)
        preset = preset or file_preset
        base = cls.preset(preset) if preset else cls()
        known = {f.name for f in fields(cls)}
        return base.override(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_json(cls, json_str: str, preset: Optional[str] = None) -> "ParserConfig":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data, preset=preset)

    @classmethod
    def from_file(
        cls, path: Union[str, Path], preset: Optional[str] = None
    ) -> "ParserConfig":
        """Load configuration from a JSON file, optionally over a preset."""
        path_obj = Path(path)
        try:
            content = path_obj.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {path_obj}: {e}") from e
        try:
            return cls.from_json(content, preset=preset)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                f"Invalid JSON in configuration file {path_obj}: {e}"
            ) from e

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration."""
        return cls(name="default", description="Balanced defaults")

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Create configuration that rejects anything after the root node."""
        return cls(
            max_depth=64,
            allow_trailing_content=False,
            name="strict",
            description="Shallow documents with nothing after the root node",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Create configuration for deeply nested documents."""
        return cls(
            max_depth=512,
            allow_trailing_content=True,
            name="lenient",
            description="Deeply nested documents, trailing content ignored",
        )

    @classmethod
    def performance_optimized(cls) -> "ParserConfig":
        """Create configuration without memory sampling."""
        return cls(
            track_memory=False,
            logging_level="ERROR",
            name="performance_optimized",
            description="No memory sampling, quieter logging",
        )

    @classmethod
    def preset(cls, name: str) -> "ParserConfig":
        """Look up a preset by name."""
        presets = {
            "default": cls.default,
            "strict": cls.strict,
            "lenient": cls.lenient,
            "performance_optimized": cls.performance_optimized,
        }
        if name not in presets:
            raise ConfigValidationError(
                f"Unknown preset: {name}",
                field_name="preset",
                suggestions=sorted(presets),
            )
        return presets[name]()


PRESET_NAMES = ("default", "strict", "lenient", "performance_optimized")

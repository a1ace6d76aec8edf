"""Configuration classes for parsing and serializing node trees.

Component configurations validate themselves in ``__post_init__``; the
top-level :class:`NodeTreeConfig` is frozen and produces modified copies via
:meth:`NodeTreeConfig.override`.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .errors import ConfigValidationError

_COMPONENTS = ("parser", "serializer")


def _check_encoding(encoding: str, field_name: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise ConfigValidationError(
            f"{field_name} must name a known codec, got {encoding!r}",
            field_name=field_name,
        ) from None


@dataclass
class ParserConfig:
    """Configuration for the deserializer and its tokenizer."""

    max_depth: int = 512
    max_input_size: Optional[int] = None
    detect_encoding: bool = True
    fallback_encoding: str = "utf-8"
    skip_doctype: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0", field_name="max_depth"
            )
        if self.max_input_size is not None and self.max_input_size <= 0:
            raise ConfigValidationError(
                "max_input_size must be > 0 or None", field_name="max_input_size"
            )
        _check_encoding(self.fallback_encoding, "fallback_encoding")


@dataclass
class SerializerConfig:
    """Configuration for the serializer."""

    pretty: bool = False
    indent: str = "  "
    short_empty_elements: bool = True
    xml_declaration: bool = False
    encoding: str = "utf-8"
    sort_attributes: bool = False

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if self.indent.strip():
            raise ConfigValidationError(
                "indent must contain only whitespace",
                field_name="indent",
                suggestions=["Use spaces or tabs, e.g. '  ' or '\\t'"],
            )
        _check_encoding(self.encoding, "encoding")


@dataclass(frozen=True)
class NodeTreeConfig:
    """Complete configuration for parsing and serialization.

    Immutable; use :meth:`override` to derive a modified copy.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)

    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Re-validate component configurations that may have been mutated."""
        self.parser.__post_init__()
        self.serializer.__post_init__()

    def override(self, **kwargs: Any) -> "NodeTreeConfig":
        """Create a new configuration with specific overrides.

        Component fields use double-underscore notation.

        Example:
            >>> config = NodeTreeConfig()
            >>> new_config = config.override(
            ...     serializer__pretty=True,
            ...     parser__max_depth=64,
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeTreeConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            field_values: Dict[str, Any] = {}
            for field_name, field_info in target_class.__dataclass_fields__.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    value = _dict_to_dataclass(value, field_info.type)
                field_values[field_name] = value
            return target_class(**field_values)

        return _dict_to_dataclass(data, cls)

    @classmethod
    def from_json(cls, json_str: str) -> "NodeTreeConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def compact(cls) -> "NodeTreeConfig":
        """Preset producing compact output with no inserted whitespace."""
        return cls(name="compact")

    @classmethod
    def pretty(cls) -> "NodeTreeConfig":
        """Preset producing indented output, one element per line."""
        return cls(
            serializer=SerializerConfig(pretty=True, indent="  "),
            name="pretty",
        )

    @classmethod
    def strict(cls) -> "NodeTreeConfig":
        """Preset rejecting DOCTYPE declarations and deep or oversized input."""
        return cls(
            parser=ParserConfig(
                max_depth=128,
                max_input_size=16 * 1024 * 1024,
                skip_doctype=False,
            ),
            name="strict",
        )

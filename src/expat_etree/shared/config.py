"""Configuration for expat-backed parse sessions.

A ParserConfig carries everything a session needs before it sees the first
byte: the input encoding, namespace handling, the entity table and the
element factory handed to the tree builder.
"""

import json
from dataclasses import dataclass, field, fields, replace
from html.entities import name2codepoint
from typing import Any, Callable, Dict, List, Optional

ElementFactory = Callable[[str, Dict[str, str]], Any]

# Entities expat resolves on its own; an entity table cannot override them
PREDEFINED_ENTITIES = frozenset({"amp", "lt", "gt", "apos", "quot"})


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
    """Immutable configuration for a single parse session.

    Attributes:
        encoding: Encoding of byte input; overrides the document's own XML
            declaration. None lets the tokenizer follow the declaration
        namespace_aware: Report namespaced names as {uri}local
        namespace_separator: Character the tokenizer puts between URI and
            local name; must be a single character
        entities: Replacement text for entity references the document does
            not declare itself
        element_factory: Callable (tag, attributes) -> element used by the
            tree builder; None selects Element
        buffer_text: Let the tokenizer merge adjacent character data
        use_foreign_dtd: Treat documents as if they had an external DTD, so
            undeclared entity references reach the entity table instead of
            failing inside the tokenizer
        correlation_id: Correlation ID for request tracking
    """

    encoding: Optional[str] = None
    namespace_aware: bool = True
    namespace_separator: str = "}"
    entities: Dict[str, str] = field(default_factory=dict)
    element_factory: Optional[ElementFactory] = None
    buffer_text: bool = False
    use_foreign_dtd: bool = True
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if self.encoding is not None and not self.encoding:
            raise ConfigValidationError(
                "encoding cannot be empty", field_name="encoding"
            )
        if len(self.namespace_separator) != 1:
            raise ConfigValidationError(
                "namespace_separator must be a single character",
                field_name="namespace_separator",
                suggestions=["Use the default '}' separator"],
            )
        for name, value in self.entities.items():
            if not name or not isinstance(name, str):
                raise ConfigValidationError(
                    "entity names must be non-empty strings",
                    field_name="entities",
                )
            if not isinstance(value, str):
                raise ConfigValidationError(
                    f"replacement text for entity {name!r} must be a string",
                    field_name="entities",
                )
        if self.element_factory is not None and not callable(self.element_factory):
            raise ConfigValidationError(
                "element_factory must be callable", field_name="element_factory"
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> config.override(namespace_aware=False).namespace_aware
            False
        """
        try:
            return replace(self, **kwargs)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def with_entities(self, **entities: str) -> "ParserConfig":
        """Create a new configuration with additional entity definitions."""
        merged = dict(self.entities)
        merged.update(entities)
        return replace(self, entities=merged)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format.

        The element factory is not serialisable and is omitted.
        """
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            if config_field.name == "element_factory":
                continue
            value = getattr(self, config_field.name)
            result[config_field.name] = dict(value) if isinstance(value, dict) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary."""
        known = {config_field.name for config_field in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                suggestions=[f"Remove {name}" for name in unknown],
            )
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def html(cls) -> "ParserConfig":
        """Create configuration that resolves HTML named entities."""
        entities = {
            name: chr(codepoint)
            for name, codepoint in name2codepoint.items()
            if name not in PREDEFINED_ENTITIES
        }
        return cls(entities=entities)

    @classmethod
    def no_namespaces(cls) -> "ParserConfig":
        """Create configuration that keeps prefixed names as written."""
        return cls(namespace_aware=False)

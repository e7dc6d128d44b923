"""
Capability descriptors and their declarative argument schemas.

Descriptors are advertised through discovery; to_json_schema() renders the
argument schema in the JSON Schema form MCP clients expect as inputSchema.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ArgumentType(str, Enum):
    """Semantic argument types a capability can declare."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string_array"
    OBJECT = "object"


@dataclass(frozen=True)
class Argument:
    """One named argument of a capability."""

    name: str
    type: ArgumentType
    description: str
    required: bool = True
    enum: Optional[Tuple[Any, ...]] = None
    default: Any = None
    properties: Tuple["Argument", ...] = ()

    def to_json_schema(self) -> Dict[str, Any]:
        if self.type == ArgumentType.STRING_ARRAY:
            schema: Dict[str, Any] = {"type": "array", "items": {"type": "string"}}
        else:
            schema = {"type": self.type.value}
        if self.type in (ArgumentType.NUMBER, ArgumentType.INTEGER) and self.enum is None:
            schema["exclusiveMinimum"] = 0
        schema["description"] = self.description
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        if self.type == ArgumentType.OBJECT and self.properties:
            schema.update(_object_schema(self.properties))
        return schema


def _object_schema(arguments: Tuple[Argument, ...]) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        "properties": {arg.name: arg.to_json_schema() for arg in arguments},
    }
    required = [arg.name for arg in arguments if arg.required]
    if required:
        schema["required"] = required
    return schema


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Name, description and argument schema of one capability."""

    name: str
    description: str
    arguments: Tuple[Argument, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Capability name must be a non-empty string")
        # Accept lists from module code but store an immutable tuple
        object.__setattr__(self, "arguments", tuple(self.arguments))

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "object"}
        schema.update(_object_schema(self.arguments))
        return schema

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.to_json_schema(),
        }


def string_arg(name: str, description: str, required: bool = True, **kwargs) -> Argument:
    return Argument(name, ArgumentType.STRING, description, required, **kwargs)


def enum_arg(name: str, values, description: str, required: bool = True, **kwargs) -> Argument:
    return Argument(name, ArgumentType.STRING, description, required, enum=tuple(values), **kwargs)


def number_arg(name: str, description: str, required: bool = True, **kwargs) -> Argument:
    return Argument(name, ArgumentType.NUMBER, description, required, **kwargs)


def integer_arg(name: str, description: str, required: bool = True, **kwargs) -> Argument:
    return Argument(name, ArgumentType.INTEGER, description, required, **kwargs)


def boolean_arg(name: str, description: str, required: bool = True, **kwargs) -> Argument:
    return Argument(name, ArgumentType.BOOLEAN, description, required, **kwargs)


def string_array_arg(name: str, description: str, required: bool = True, **kwargs) -> Argument:
    return Argument(name, ArgumentType.STRING_ARRAY, description, required, **kwargs)


def object_arg(name: str, description: str, required: bool = True, properties=(), **kwargs) -> Argument:
    return Argument(
        name, ArgumentType.OBJECT, description, required, properties=tuple(properties), **kwargs
    )

"""
Registry Module - Black Box Interface

Purpose: Compose capability modules into one dispatch table
Interface: CapabilityRegistry, load_modules(), CapabilityDescriptor, Argument
Hidden: Collision detection, freezing

Loading fails fast on duplicate names; the result is read-only.
"""

from .descriptor import (
    Argument,
    ArgumentType,
    CapabilityDescriptor,
    boolean_arg,
    enum_arg,
    integer_arg,
    number_arg,
    object_arg,
    string_arg,
    string_array_arg,
)
from .registry import (
    CapabilityModule,
    CapabilityRegistry,
    Handler,
    ModuleFactory,
    RegisteredCapability,
    load_modules,
)

__all__ = [
    "Argument",
    "ArgumentType",
    "CapabilityDescriptor",
    "CapabilityModule",
    "CapabilityRegistry",
    "Handler",
    "ModuleFactory",
    "RegisteredCapability",
    "boolean_arg",
    "enum_arg",
    "integer_arg",
    "load_modules",
    "number_arg",
    "object_arg",
    "string_arg",
    "string_array_arg",
]

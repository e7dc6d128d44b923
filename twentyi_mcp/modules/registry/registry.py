"""
Capability registry.

Folds the descriptors and handlers of every capability module into one
name -> (descriptor, handler) table. Built once at startup, then frozen.

A name registered by two modules is a fatal load error.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
)

from twentyi_mcp.errors import (
    DuplicateCapabilityError,
    ModuleContractError,
    RegistryFrozenError,
)

from .descriptor import CapabilityDescriptor

if TYPE_CHECKING:
    from twentyi_mcp.modules.upstream import UpstreamClient

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Awaitable[Any]]


class CapabilityModule(Protocol):
    """What every capability module provides."""

    name: str

    def descriptors(self) -> List[CapabilityDescriptor]:
        """Descriptors for every capability in this module."""
        ...

    def handlers(self) -> Dict[str, Handler]:
        """Handler per descriptor name."""
        ...


ModuleFactory = Callable[["UpstreamClient"], CapabilityModule]


@dataclass(frozen=True)
class RegisteredCapability:
    """One registry entry."""

    descriptor: CapabilityDescriptor
    handler: Handler
    module_name: str

    @property
    def name(self) -> str:
        return self.descriptor.name


class CapabilityRegistry:
    """
    Dispatch table keyed by capability name.

    Insertion order is preserved, so discovery lists capabilities in module
    registration order.
    """

    def __init__(self):
        self._entries: Mapping[str, RegisteredCapability] = {}
        self._modules: List[str] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register_module(self, module: CapabilityModule) -> int:
        """
        Add every capability of a module.

        The module is checked in full before anything is inserted, so a
        failing module leaves the table untouched.

        Args:
            module: Capability module

        Returns:
            Number of capabilities added

        Raises:
            RegistryFrozenError: If the registry is frozen
            ModuleContractError: If descriptors and handlers do not match
            DuplicateCapabilityError: If a name is already taken
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register module '{module.name}': registry is frozen"
            )

        module_name = module.name
        descriptors = list(module.descriptors())
        handlers = dict(module.handlers())

        seen: Dict[str, CapabilityDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in seen:
                raise DuplicateCapabilityError(descriptor.name, module_name, module_name)
            seen[descriptor.name] = descriptor

        missing_handlers = sorted(set(seen) - set(handlers))
        orphan_handlers = sorted(set(handlers) - set(seen))
        if missing_handlers or orphan_handlers:
            problems = []
            if missing_handlers:
                problems.append(f"no handler for {', '.join(missing_handlers)}")
            if orphan_handlers:
                problems.append(f"no descriptor for {', '.join(orphan_handlers)}")
            raise ModuleContractError(f"Module '{module_name}': {'; '.join(problems)}")

        for name in seen:
            existing = self._entries.get(name)
            if existing is not None:
                raise DuplicateCapabilityError(name, module_name, existing.module_name)

        for name, descriptor in seen.items():
            self._entries[name] = RegisteredCapability(
                descriptor=descriptor,
                handler=handlers[name],
                module_name=module_name,
            )
        self._modules.append(module_name)

        logger.debug(f"Registered {len(seen)} capabilities from module '{module_name}'")
        return len(seen)

    def freeze(self) -> "CapabilityRegistry":
        """Stop accepting modules. Idempotent."""
        if not self._frozen:
            self._entries = MappingProxyType(dict(self._entries))
            self._frozen = True
        return self

    def get(self, name: str) -> Optional[RegisteredCapability]:
        return self._entries.get(name)

    def descriptors(self) -> List[CapabilityDescriptor]:
        return [entry.descriptor for entry in self._entries.values()]

    def names(self) -> List[str]:
        return list(self._entries)

    @property
    def module_names(self) -> List[str]:
        return list(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_modules(cls, modules: Iterable[CapabilityModule]) -> "CapabilityRegistry":
        """Register modules in order and return the frozen registry."""
        registry = cls()
        for module in modules:
            registry.register_module(module)
        registry.freeze()
        logger.info(
            f"Loaded {len(registry)} capabilities from {len(registry.module_names)} modules: "
            f"{', '.join(registry.module_names) or 'none'}"
        )
        return registry


def load_modules(
    factories: Sequence[ModuleFactory],
    client: "UpstreamClient",
) -> CapabilityRegistry:
    """
    Construct every module from the shared client and fold them into a frozen registry.

    Raises:
        CapabilityLoadError: On any collision or contract violation
    """
    return CapabilityRegistry.from_modules(factory(client) for factory in factories)

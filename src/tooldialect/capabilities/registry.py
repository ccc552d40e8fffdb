"""Capability registry.

An ordered, read-only collection of descriptors for one conversation.
Built once per session; dialects only read from it, so no locking is
needed when several turns share it.
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from tooldialect.capabilities.descriptor import Capability, CapabilityDescriptor
from tooldialect.foundation.errors import ErrorCode, config_error


class CapabilityRegistry:
    """Ordered tools available to a conversation, looked up by exact name.

    Accepts descriptors or any object implementing the ``Capability``
    protocol. Names must be unique.

    Example:
        >>> registry = CapabilityRegistry([get_weather, search])
        >>> registry.get("get_weather").name
        'get_weather'
    """

    __slots__ = ("_entries", "_by_name")

    def __init__(self, capabilities: Iterable[CapabilityDescriptor | Capability] = ()) -> None:
        entries: list[CapabilityDescriptor] = []
        by_name: dict[str, CapabilityDescriptor] = {}
        for item in capabilities:
            descriptor = (
                item if isinstance(item, CapabilityDescriptor)
                else CapabilityDescriptor.from_capability(item)
            )
            if descriptor.name in by_name:
                raise config_error(ErrorCode.CONFIG_DUPLICATE_CAPABILITY, tool=descriptor.name)
            entries.append(descriptor)
            by_name[descriptor.name] = descriptor

        self._entries = tuple(entries)
        self._by_name = MappingProxyType(by_name)

    def get(self, name: str) -> CapabilityDescriptor | None:
        """Look up a descriptor by exact, case-sensitive name."""
        return self._by_name.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(d.name for d in self._entries)

    def __iter__(self) -> Iterator[CapabilityDescriptor]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"CapabilityRegistry({list(self.names())!r})"

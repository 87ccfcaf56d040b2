from __future__ import annotations

import dataclasses
from typing import Dict, Iterator, NamedTuple, Optional, Tuple


@dataclasses.dataclass(frozen=True)
class Attribute:
    """An MBean attribute to read, and where to put its value."""

    attr: str
    field: str = ""
    event: str = ""

    @property
    def has_field(self) -> bool:
        return bool(self.field and self.field.strip())


@dataclasses.dataclass(frozen=True)
class Target:
    """A remote JVM that Jolokia should read from when acting as a proxy."""

    url: str = ""
    user: str = ""
    password: str = ""


@dataclasses.dataclass(frozen=True)
class Mapping:
    mbean: str
    attributes: Tuple[Attribute, ...] = ()
    target: Optional[Target] = Target()

    def __post_init__(self):
        # a missing target means no proxy
        if self.target is None:
            object.__setattr__(self, "target", Target())


class AttributeMappingKey(NamedTuple):
    mbean: str
    attr: str


class AttributeMapping:
    """
    Reverse lookup from the (canonical mbean name, attribute name) pairs found
    in Jolokia responses to the attribute definitions they were requested for.

    Adding the same pair twice keeps the definition added last.
    """

    def __init__(self):
        self._attributes: Dict[AttributeMappingKey, Attribute] = {}

    def add(self, mbean: str, attr: str, attribute: Attribute) -> None:
        self._attributes[AttributeMappingKey(mbean, attr)] = attribute

    def get(self, mbean: str, attr: str) -> Optional[Attribute]:
        return self._attributes.get(AttributeMappingKey(mbean, attr))

    def __contains__(self, key) -> bool:
        return key in self._attributes

    def __iter__(self) -> Iterator[AttributeMappingKey]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __eq__(self, other):
        if not isinstance(other, AttributeMapping):
            return NotImplemented
        return self._attributes == other._attributes

    def __repr__(self) -> str:
        return f"<AttributeMapping containing {len(self._attributes)} attributes>"

from __future__ import annotations

import dataclasses
import re
import types
from typing import Iterator, Mapping, Tuple

from jmxmap import MalformedMBeanName

#
# Managed Bean object names, following the rules of
# https://docs.oracle.com/javase/8/docs/api/javax/management/ObjectName.html
#
#   domain:key=value[,key=value]*
#
# Keys are non-empty and may not contain any of , = : * ?
# Values are either unquoted (non-empty, without any of , = : ")
# or quoted, in which case they may contain anything, including commas.
#

_property = re.compile(r'([^,=:*?]+)=([^,=:"]+|".*")')

# Jolokia escapes these characters with a leading '!' in its own
# canonical names, see
# https://jolokia.org/reference/html/protocol.html#escape-rules
_escaped_characters = re.compile(r'(["./!])')


def tokenize_properties(properties: str) -> Iterator[Tuple[str, str]]:
    """Split an MBean property string into (key, value) pairs.

    Tokens must follow each other directly, separated by single commas.
    Any character that is not consumed by a token or a separator makes
    the whole property string invalid and raises MalformedMBeanName.
    """
    position = 0
    while True:
        token = _property.match(properties, position)
        if not token:
            raise MalformedMBeanName(
                f"unexpected input at position {position} of mbean properties",
                properties,
            )
        yield token.group(1), token.group(2)
        position = token.end()
        if position == len(properties):
            return
        if properties[position] != ",":
            raise MalformedMBeanName(
                f"unexpected input at position {position} of mbean properties",
                properties,
            )
        position += 1


@dataclasses.dataclass(frozen=True)
class MBeanName:
    domain: str
    properties: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(
            self, "properties", types.MappingProxyType(dict(self.properties))
        )

    def __hash__(self):
        return hash((self.domain, frozenset(self.properties.items())))

    @classmethod
    def parse(cls, mbean: str) -> MBeanName:
        """
        Parse a Managed Bean name into its domain and properties.

        :param mbean: An object name, eg. 'java.lang:type=Memory'
        :return: A new MBeanName object
        :raises MalformedMBeanName: if the name does not follow the object
                                    name rules, or has no properties
        """
        domain, separator, properties = mbean.partition(":")
        if not separator or not domain or not properties:
            raise MalformedMBeanName(
                "domain and properties needed in mbean name", mbean
            )
        try:
            parsed = dict(tokenize_properties(properties))
        except MalformedMBeanName:
            raise MalformedMBeanName(
                "mbean properties must be in the form key=value", mbean
            ) from None
        return cls(domain=domain, properties=parsed)

    def canonicalize(self, escape: bool = False) -> str:
        """
        Serialize the name with its properties in lexicographic order, so that
        names compare equal regardless of the order they were written in.
        With escape=True the characters " . ! / in property values are
        prefixed with '!', as Jolokia does for names embedded in GET URLs.
        """
        tokens = []
        for key, value in self.properties.items():
            if escape:
                value = _escaped_characters.sub(r"!\1", value)
            tokens.append(key + "=" + value)
        return self.domain + ":" + ",".join(sorted(tokens))

    def __str__(self):
        return self.canonicalize()


def parse_mbean_name(mbean: str) -> MBeanName:
    return MBeanName.parse(mbean)

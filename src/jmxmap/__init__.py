"""Top-level package for jmxmap."""

from __future__ import annotations

import logging

__author__ = "jmxmap developers"
__version__ = "0.3.0"

logging.getLogger("jmxmap").addHandler(logging.NullHandler())


class ConfigurationError(Exception):
    pass


class JMXMapError(Exception):
    """Base class for errors raised while building Jolokia requests."""


class MalformedMBeanName(JMXMapError, ValueError):
    def __init__(self, message: str, mbean: str):
        super().__init__(f"{message}: {mbean}")
        self.mbean = mbean


class UnsupportedProxyTarget(JMXMapError):
    pass


class SerializationFailure(JMXMapError):
    pass

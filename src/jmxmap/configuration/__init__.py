from __future__ import annotations

import logging
import os
import pathlib
import typing

import marshmallow as mm
import yaml

from jmxmap import ConfigurationError
from jmxmap.configuration import plugin_logging
from jmxmap.configuration.schemas import ConfigSchema, JolokiaConfiguration

logger = logging.getLogger("jmxmap.configuration")


class Configuration:
    __slots__ = ("_jolokia", "_logging", "_logging_incrementer")

    def __init__(self, loaded: dict):
        self._jolokia: typing.Optional[JolokiaConfiguration] = loaded.get("jolokia")
        self._logging: typing.Optional[typing.Dict[str, typing.Any]] = loaded.get(
            "logging"
        )
        self._logging_incrementer: typing.Optional[
            plugin_logging.LoggingIncrementer
        ] = None

    @property
    def jolokia(self) -> typing.Optional[JolokiaConfiguration]:
        return self._jolokia

    @property
    def logging(self) -> typing.Optional[plugin_logging.LoggingIncrementer]:
        return self._logging_incrementer

    def activate_logging(self) -> typing.Optional[plugin_logging.LoggingIncrementer]:
        """Apply the logging section, if there is one. Only applied once."""
        if self._logging is not None and self._logging_incrementer is None:
            logger.debug("Applying logging configuration")
            self._logging_incrementer = plugin_logging.activate(self._logging)
        return self._logging_incrementer

    def __str__(self):
        if self._jolokia:
            jolokia = (
                f" with {len(self._jolokia.mappings)} mappings"
                f" for {len(self._jolokia.hosts)} hosts"
            )
        else:
            jolokia = " without jolokia section"
        if self._logging_incrementer:
            logging_state = ", logging activated"
        elif self._logging is not None:
            logging_state = ", logging not activated"
        else:
            logging_state = ""
        return f"<JMXMapConfiguration{jolokia}{logging_state}>"

    __repr__ = __str__


def _read_configuration_yaml(configuration: str) -> dict:
    try:
        yaml_dict = yaml.safe_load(configuration)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration: {e}") from None

    if not isinstance(yaml_dict, dict) or "version" not in yaml_dict:
        raise ConfigurationError("Invalid configuration specified")
    if yaml_dict["version"] != 1:
        raise ConfigurationError(
            f"This version of jmxmap does not understand v{yaml_dict['version']} configurations"
        )

    try:
        return ConfigSchema().load(yaml_dict, unknown=mm.RAISE)
    except mm.ValidationError as e:
        raise ConfigurationError(f"Invalid YAML configuration: {e}") from None


def from_file(config_file=None) -> Configuration:
    if not config_file:
        config_file = os.environ.get("JMXMAP_CONFIG")
    if not config_file:
        return Configuration({})
    config_file = pathlib.Path(config_file)
    if not config_file.is_file():
        raise ConfigurationError(f"jmxmap configuration file {config_file} not found")
    try:
        return Configuration(_read_configuration_yaml(config_file.read_text()))
    except ConfigurationError as e:
        raise ConfigurationError(
            f"Error reading configuration file {config_file}: {e}"
        ) from None


def from_string(configuration: str) -> Configuration:
    return Configuration(_read_configuration_yaml(configuration))

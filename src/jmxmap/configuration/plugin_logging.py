from __future__ import annotations

import copy
import logging.config
import socket
from typing import Any

import graypy.handler

import jmxmap

_forbidden_incremental_keys = {"filters", "formatters", "handlers"}


def _config_is_incremental(config: dict[str, Any]) -> bool:
    if _forbidden_incremental_keys.intersection(config):
        return False
    if _forbidden_incremental_keys.intersection(config.get("root", {})):
        return False
    return not any(
        _forbidden_incremental_keys.intersection(logger_config)
        for logger_config in config.get("loggers", {}).values()
    )


class LoggingIncrementer:
    """
    Applies the incremental 'verbose' logging definitions of a configuration,
    one per verbosity level, eg. one for each -v given on the command line.
    """

    def __init__(self, verbose: list[dict[str, Any]]):
        self._verbose = verbose
        self._verbosity_level = 0

    @property
    def verbosity(self) -> int:
        return self._verbosity_level

    @verbosity.setter
    def verbosity(self, value: int) -> None:
        while self._verbosity_level < min(value, len(self._verbose)):
            logging.config.dictConfig(self._verbose[self._verbosity_level])
            self._verbosity_level += 1

    def __repr__(self) -> str:
        return f"<LoggingConfiguration verbosity={self._verbosity_level}>"


def activate(configuration: dict) -> LoggingIncrementer:
    """Set up logging from the 'logging' section of a jmxmap configuration."""
    logconfig = copy.deepcopy(configuration)
    logconfig.setdefault("version", 1)
    logconfig.setdefault("disable_existing_loggers", False)
    logconfig.setdefault("incremental", False)

    if logconfig["incremental"] and not _config_is_incremental(logconfig):
        raise jmxmap.ConfigurationError(
            "Logging configuration error: definition defines items not allowed "
            "in an incremental definition"
        )

    verbose = logconfig.pop("verbose", [])
    for level, verbosity_def in enumerate(verbose, 1):
        if not isinstance(verbosity_def, dict):
            raise jmxmap.ConfigurationError(
                f"Logging configuration error: verbosity level {level} definition "
                "is not a dictionary"
            )
        verbosity_def.setdefault("version", logconfig["version"])
        verbosity_def.setdefault("incremental", True)
        if verbosity_def["incremental"] and not _config_is_incremental(verbosity_def):
            raise jmxmap.ConfigurationError(
                f"Logging configuration error: verbosity level {level} definition "
                "defines items not allowed in an incremental definition"
            )

    logging.config.dictConfig(logconfig)
    return LoggingIncrementer(verbose)


class _SyslogLevels:
    # graypy looks up syslog levels by Python level number, which
    # only covers the predefined levels
    @staticmethod
    def get(level, _):
        for threshold, syslog_level in (
            (20, 7),  # DEBUG
            (25, 6),  # INFO
            (30, 5),  # NOTICE
            (40, 4),  # WARNING
            (50, 3),  # ERROR
            (60, 2),  # CRITICAL
        ):
            if level < threshold:
                return syslog_level
        return 1  # ALERT


def _resolve_hostname(host: str) -> str:
    # Resolve once during setup, not once per emitted record
    try:
        return socket.gethostbyname(host)
    except OSError:
        return host


def GraylogTCPHandler(*, host: str, port: int) -> logging.Handler:
    """
    A handler factory for logging to a Graylog server via TCP, usable as
    '()' in the handlers section of the logging configuration.
    """
    graypy.handler.SYSLOG_LEVELS = _SyslogLevels()
    return graypy.GELFTCPHandler(_resolve_hostname(host), port, level_names=True)


def GraylogUDPHandler(*, host: str, port: int) -> logging.Handler:
    """
    A handler factory for logging to a Graylog server via UDP, usable as
    '()' in the handlers section of the logging configuration.
    """
    graypy.handler.SYSLOG_LEVELS = _SyslogLevels()
    return graypy.GELFUDPHandler(_resolve_hostname(host), port, level_names=True)

#
# jmxmap.requests
#   Show the Jolokia requests that would be issued for a configuration
#

from __future__ import annotations

import argparse
import logging
import sys
import typing

import jmxmap
import jmxmap.client
import jmxmap.configuration

logger = logging.getLogger("jmxmap.cli.show_requests")


def describe_requests(
    jolokia: jmxmap.configuration.JolokiaConfiguration,
    method: typing.Optional[str] = None,
) -> list[str]:
    """Compile the configured mappings for every host into printable lines."""
    compiler = jmxmap.client.select(jolokia.http_method if method is None else method)
    logger.debug("Using %r for namespace %s", compiler, jolokia.namespace)
    lines = []
    for host in jolokia.hosts:
        http_requests, attribute_mapping = compiler.build_requests(
            jolokia.mappings, host
        )
        for request in http_requests:
            lines.append(f"{request.method} {request.url}")
            if request.data:
                lines.append(request.data.decode("utf-8"))
        logger.debug(
            "%d requests for %s, mapping %d attributes",
            len(http_requests),
            host,
            len(attribute_mapping),
        )
    return lines


def run(args=None) -> None:
    parser = argparse.ArgumentParser(usage="jmxmap.requests [options]")
    parser.add_argument("-?", action="help", help=argparse.SUPPRESS)
    parser.add_argument(
        "-c",
        "--config",
        dest="config",
        metavar="FILE",
        default=None,
        help="Configuration file to use (default: $JMXMAP_CONFIG)",
    )
    parser.add_argument(
        "-m",
        "--method",
        dest="method",
        default=None,
        help="HTTP method to build requests for, overriding the configuration. "
        "Anything other than GET builds a single POST request.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="count",
        default=0,
        help="Increase logging verbosity, can be given multiple times",
    )
    args = parser.parse_args(args)

    try:
        config = jmxmap.configuration.from_file(args.config)
        incrementer = config.activate_logging()
        if incrementer:
            incrementer.verbosity = args.verbose
        if not config.jolokia:
            sys.exit("No jolokia section found in configuration")
        lines = describe_requests(config.jolokia, method=args.method)
    except (jmxmap.ConfigurationError, jmxmap.JMXMapError) as e:
        sys.exit(f"Could not build requests: {e}")

    for line in lines:
        print(line)

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from typing import Any, Dict, Iterable, List, Tuple

import requests

from jmxmap import SerializationFailure, UnsupportedProxyTarget
from jmxmap.mapping import AttributeMapping, Mapping
from jmxmap.mbean import MBeanName

logger = logging.getLogger("jmxmap.client")

#
# Jolokia 1.5 and later respond with canonical MBean names when wildcards
# are used, even if canonicalNaming=false was requested. Attribute mappings
# are therefore always keyed by names canonicalized on this side.
#


class RequestCompiler(ABC):
    """Turns a list of MBean attribute mappings into Jolokia read requests."""

    method: str

    @abstractmethod
    def compile(self, mappings: Iterable[Mapping]) -> Tuple[Any, AttributeMapping]:
        """
        Build the request descriptors for a list of mappings, together with
        the attribute mapping needed to interpret the responses.

        No partial results are returned: if any mapping is invalid the
        whole batch is rejected with an exception.
        """

    @abstractmethod
    def build_requests(
        self, mappings: Iterable[Mapping], base_url: str
    ) -> Tuple[List[requests.Request], AttributeMapping]:
        """
        Wrap the compiled request descriptors into (unsent) HTTP requests
        against a Jolokia endpoint, eg. 'http://localhost:8778/jolokia'.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} method={self.method}>"

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))


class GetRequestCompiler(RequestCompiler):
    method = "GET"

    @staticmethod
    def read_uri(mbean: str, attribute: str) -> str:
        """
        Return the Jolokia read URI for a single attribute, in the form
          /read/<mbean>/<attribute>?ignoreErrors=true&canonicalNaming=false
        The mbean name must already be escaped.
        """
        return f"/read/{mbean}/{attribute}?ignoreErrors=true&canonicalNaming=false"

    def compile(self, mappings: Iterable[Mapping]) -> Tuple[List[str], AttributeMapping]:
        attribute_mapping = AttributeMapping()
        uris = []
        for mapping in mappings:
            mbean = MBeanName.parse(mapping.mbean)
            if mapping.target.url:
                raise UnsupportedProxyTarget(
                    "Proxy requests are only valid when using POST method, "
                    f"found target {mapping.target.url} for mbean {mapping.mbean}"
                )
            canonical_name = mbean.canonicalize(escape=True)
            # Field selectors are resolved when decoding the response,
            # so each attribute is always read as a whole.
            for attribute in mapping.attributes:
                attribute_mapping.add(canonical_name, attribute.attr, attribute)
                uris.append(self.read_uri(canonical_name, attribute.attr))
        return uris, attribute_mapping

    def build_requests(
        self, mappings: Iterable[Mapping], base_url: str
    ) -> Tuple[List[requests.Request], AttributeMapping]:
        uris, attribute_mapping = self.compile(mappings)
        base_url = base_url.rstrip("/")
        http_requests = []
        for uri in uris:
            logger.debug("Jolokia GET request: %s", uri)
            http_requests.append(requests.Request("GET", base_url + uri))
        return http_requests, attribute_mapping


class PostRequestCompiler(RequestCompiler):
    method = "POST"

    @staticmethod
    def request_block(mbean: str, mapping: Mapping) -> Dict[str, Any]:
        block: Dict[str, Any] = {
            "type": "read",
            "mbean": mbean,
            "attribute": [attribute.attr for attribute in mapping.attributes],
            "config": {"ignoreErrors": True, "canonicalNaming": True},
        }
        if mapping.target.url:
            target = {"url": mapping.target.url}
            if mapping.target.user:
                target["user"] = mapping.target.user
            if mapping.target.password:
                target["password"] = mapping.target.password
            block["target"] = target
        return block

    def compile(self, mappings: Iterable[Mapping]) -> Tuple[bytes, AttributeMapping]:
        attribute_mapping = AttributeMapping()
        blocks = []
        for mapping in mappings:
            # Names travel as JSON strings rather than URL path segments,
            # so Jolokia's escaping rules do not apply here.
            canonical_name = MBeanName.parse(mapping.mbean).canonicalize(escape=False)
            for attribute in mapping.attributes:
                attribute_mapping.add(canonical_name, attribute.attr, attribute)
            blocks.append(self.request_block(canonical_name, mapping))
        try:
            body = json.dumps(blocks, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationFailure(
                f"Could not serialize Jolokia request body: {e}"
            ) from e
        return body, attribute_mapping

    def build_requests(
        self, mappings: Iterable[Mapping], base_url: str
    ) -> Tuple[List[requests.Request], AttributeMapping]:
        body, attribute_mapping = self.compile(mappings)
        logger.debug("Jolokia POST request body: %s", body.decode("utf-8"))
        http_request = requests.Request(
            "POST",
            base_url.rstrip("/"),
            data=body,
            headers={"Content-Type": "application/json"},
        )
        return [http_request], attribute_mapping


def select(method: str) -> RequestCompiler:
    """
    Return the request compiler for a configured HTTP method.
    Only the exact string 'GET' selects GET requests, every other value
    (including an empty string) selects batched POST requests.
    """
    if method == "GET":
        return GetRequestCompiler()
    return PostRequestCompiler()

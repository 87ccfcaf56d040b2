from __future__ import annotations

import os
from unittest import mock

import pytest

import jmxmap
import jmxmap.configuration
from jmxmap.mapping import Attribute, Mapping, Target

sample_configuration = """
version: 1

jolokia:
  hosts:
    - http://localhost:8778/jolokia
    - http://otherhost:8778/jolokia/
  namespace: jvm
  http_method: GET
  mappings:
    - mbean: java.lang:type=Runtime
      attributes:
        - attr: Uptime
          field: uptime
    - mbean: java.lang:type=GarbageCollector,name=ConcurrentMarkSweep
      attributes:
        - attr: CollectionTime
          field: gc.cms_collection_time
          event: gc
        - attr: CollectionCount
          field: gc.cms_collection_count
          event: gc
    - mbean: java.lang:type=Memory
      target:
        url: service:jmx:rmi:///jndi/rmi://targethost:9999/jmxrmi
        user: jolokia
        password: secret
      attributes:
        - attr: HeapMemoryUsage
"""


def test_return_empty_configuration_if_no_path_specified():
    with mock.patch.dict(os.environ, {"JMXMAP_CONFIG": ""}):
        config = jmxmap.configuration.from_file()
    assert config.jolokia is None
    assert config.activate_logging() is None
    assert "without jolokia section" in str(config)


def test_loading_minimal_valid_configuration():
    config = jmxmap.configuration.from_string("version: 1")
    assert config.jolokia is None
    assert config.logging is None


def test_cannot_load_unversioned_yaml_files():
    with pytest.raises(jmxmap.ConfigurationError, match="Invalid configuration"):
        jmxmap.configuration.from_string("value: 1")


def test_cannot_load_unknown_configuration_file_versions():
    with pytest.raises(jmxmap.ConfigurationError, match="not understand"):
        jmxmap.configuration.from_string("version: 0")


def test_cannot_load_invalid_yaml():
    with pytest.raises(jmxmap.ConfigurationError, match="Invalid YAML"):
        jmxmap.configuration.from_string("version: 1\njolokia: [")


def test_unknown_sections_are_rejected():
    with pytest.raises(jmxmap.ConfigurationError, match="banana"):
        jmxmap.configuration.from_string("version: 1\nbanana: {}")


def test_loading_configuration_from_file(tmp_path):
    config_file = tmp_path.joinpath("config.yml")
    config_file.write_text(sample_configuration)
    config = jmxmap.configuration.from_file(os.fspath(config_file))
    assert len(config.jolokia.mappings) == 3
    config = jmxmap.configuration.from_file(config_file)
    assert len(config.jolokia.mappings) == 3
    with mock.patch.dict(os.environ, {"JMXMAP_CONFIG": os.fspath(config_file)}):
        config = jmxmap.configuration.from_file()
    assert config.jolokia.namespace == "jvm"
    assert "with 3 mappings for 2 hosts" in str(config)


def test_missing_files_are_reported(tmp_path):
    with pytest.raises(jmxmap.ConfigurationError, match="not found"):
        jmxmap.configuration.from_file(tmp_path / "missing.yml")


def test_errors_in_files_name_the_file(tmp_path):
    config_file = tmp_path.joinpath("config.yml")
    config_file.write_text("version: 2")
    with pytest.raises(jmxmap.ConfigurationError, match="config.yml"):
        jmxmap.configuration.from_file(config_file)


def test_mappings_are_loaded_into_mapping_objects():
    jolokia = jmxmap.configuration.from_string(sample_configuration).jolokia
    assert jolokia.hosts == (
        "http://localhost:8778/jolokia",
        "http://otherhost:8778/jolokia/",
    )
    assert jolokia.http_method == "GET"
    assert jolokia.mappings[0] == Mapping(
        mbean="java.lang:type=Runtime",
        attributes=(Attribute(attr="Uptime", field="uptime"),),
    )
    assert jolokia.mappings[1].attributes[1] == Attribute(
        attr="CollectionCount", field="gc.cms_collection_count", event="gc"
    )
    assert jolokia.mappings[2].target == Target(
        url="service:jmx:rmi:///jndi/rmi://targethost:9999/jmxrmi",
        user="jolokia",
        password="secret",
    )


def test_http_method_defaults_to_post():
    config = jmxmap.configuration.from_string(
        sample_configuration.replace("  http_method: GET\n", "")
    )
    assert config.jolokia.http_method == "POST"


def test_invalid_jolokia_sections_are_rejected():
    with pytest.raises(jmxmap.ConfigurationError, match="mappings"):
        jmxmap.configuration.from_string(
            """
            version: 1
            jolokia:
              hosts: [http://localhost:8778/jolokia]
              namespace: jvm
            """
        )
    with pytest.raises(jmxmap.ConfigurationError, match="hosts"):
        jmxmap.configuration.from_string(
            """
            version: 1
            jolokia:
              hosts: []
              namespace: jvm
              mappings: []
            """
        )
    with pytest.raises(jmxmap.ConfigurationError, match="attr"):
        jmxmap.configuration.from_string(
            """
            version: 1
            jolokia:
              hosts: [http://localhost:8778/jolokia]
              namespace: jvm
              mappings:
                - mbean: java.lang:type=Runtime
                  attributes:
                    - field: uptime
            """
        )


def test_malformed_mbean_names_are_rejected():
    with pytest.raises(jmxmap.ConfigurationError, match="key=value"):
        jmxmap.configuration.from_string(
            sample_configuration.replace(
                "java.lang:type=Runtime", "java.lang:type=Runtime,name"
            )
        )

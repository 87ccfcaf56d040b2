from __future__ import annotations

import dataclasses
from typing import Tuple

import marshmallow as mm
from marshmallow.validate import Length

import jmxmap
from jmxmap.mapping import Attribute, Mapping, Target
from jmxmap.mbean import MBeanName


@dataclasses.dataclass(frozen=True)
class JolokiaConfiguration:
    hosts: Tuple[str, ...]
    namespace: str
    mappings: Tuple[Mapping, ...]
    http_method: str = "POST"


class AttributeSchema(mm.Schema):
    attr = mm.fields.Str(required=True)
    field = mm.fields.Str(load_default="")
    event = mm.fields.Str(load_default="")

    @mm.post_load
    def make_attribute(self, data, **kwargs):
        return Attribute(**data)


class TargetSchema(mm.Schema):
    url = mm.fields.Str(required=True)
    user = mm.fields.Str(load_default="")
    password = mm.fields.Str(load_default="")

    @mm.post_load
    def make_target(self, data, **kwargs):
        return Target(**data)


class MappingSchema(mm.Schema):
    mbean = mm.fields.Str(required=True)
    attributes = mm.fields.List(mm.fields.Nested(AttributeSchema), load_default=list)
    target = mm.fields.Nested(TargetSchema)

    @mm.validates("mbean")
    def validate_mbean(self, value, **kwargs):
        try:
            MBeanName.parse(value)
        except jmxmap.MalformedMBeanName as e:
            raise mm.ValidationError(str(e)) from None

    @mm.post_load
    def make_mapping(self, data, **kwargs):
        return Mapping(
            mbean=data["mbean"],
            attributes=tuple(data["attributes"]),
            target=data.get("target") or Target(),
        )


class JolokiaSchema(mm.Schema):
    hosts = mm.fields.List(
        mm.fields.Str(), required=True, validate=Length(min=1)
    )
    namespace = mm.fields.Str(required=True)
    http_method = mm.fields.Str(load_default="POST")
    mappings = mm.fields.List(
        mm.fields.Nested(MappingSchema),
        required=True,
        error_messages={"required": "definition lacks the mandatory 'mappings' key"},
    )

    @mm.post_load
    def make_configuration(self, data, **kwargs):
        return JolokiaConfiguration(
            hosts=tuple(data["hosts"]),
            namespace=data["namespace"],
            mappings=tuple(data["mappings"]),
            http_method=data["http_method"],
        )


class ConfigSchema(mm.Schema):
    version = mm.fields.Int(required=True)
    jolokia = mm.fields.Nested(JolokiaSchema)
    logging = mm.fields.Dict(keys=mm.fields.Str())

"""Default description conventions, one per entity kind.

A convention looks up what the inventory declares about an entity and
returns a description, or None when nothing is declared. Conventions never
fill defaults; that happens when the node is built.
"""

import logging
from enum import Enum
from typing import Any, Callable

from api_spec_builder.description.models import (
    EndpointDescription,
    MemberDescription,
    OptionDescription,
    TypeDescription,
)
from api_spec_builder.inventory.base import (
    EndpointDescriptor,
    EndpointInventory,
    EnumOption,
    MemberDescriptor,
    ModuleDescriptor,
    ResourceDescriptor,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    MODULE = "module"
    RESOURCE = "resource"
    ENDPOINT = "endpoint"
    REQUEST = "request"
    RESPONSE = "response"
    TYPE = "type"
    MEMBER = "member"
    URL_PARAMETER = "url_parameter"
    QUERYSTRING = "querystring"
    STATUS_CODE = "status_code"
    HEADER = "header"
    OPTION = "option"


Convention = Callable[[Any], Any]


def _in_namespace(namespace: str, candidate: str) -> bool:
    if not candidate:
        return True
    return namespace == candidate or namespace.startswith(candidate + ".")


def _closest(namespace: str, descriptors: list) -> Any:
    matches = [d for d in descriptors if _in_namespace(namespace, d.namespace)]
    if not matches:
        return None
    return max(matches, key=lambda d: len(d.namespace))


class Conventions:
    """Convention table keyed by entity kind.

    Individual conventions can be swapped out by passing ``replace``; kinds
    without a convention of their own (request, response, parameters) reuse
    the type and member conventions.
    """

    def __init__(self, inventory: EndpointInventory, replace: dict[EntityKind, Convention] | None = None):
        self.inventory = inventory
        self.registry = inventory.registry
        self._table: dict[EntityKind, Convention] = {
            EntityKind.MODULE: self.module,
            EntityKind.RESOURCE: self.resource,
            EntityKind.ENDPOINT: self.endpoint,
            EntityKind.TYPE: self.type,
            EntityKind.MEMBER: self.member,
            EntityKind.OPTION: self.option,
            EntityKind.STATUS_CODE: self.status_codes,
            EntityKind.HEADER: self.headers,
        }
        self._table.update(replace or {})

    def describe(self, kind: EntityKind, source: Any) -> Any:
        return self._table[kind](source)

    def module(self, endpoint: EndpointDescriptor) -> ModuleDescriptor | None:
        module = _closest(endpoint.namespace, self.inventory.modules)
        logger.debug("Module for %s: %s", endpoint.identity, module.name if module else None)
        return module

    def resource(self, endpoint: EndpointDescriptor) -> ResourceDescriptor | None:
        for resource in self.inventory.resources:
            if resource.handler == endpoint.handler:
                return resource
        candidates = [r for r in self.inventory.resources if r.handler is None]
        return _closest(endpoint.namespace, candidates)

    def endpoint(self, endpoint: EndpointDescriptor) -> EndpointDescription | None:
        annotation = self.registry.annotation("endpoint", endpoint.identity)
        if annotation is None:
            return None
        return EndpointDescription(
            name=annotation.name,
            comments=annotation.comments,
            request_comments=annotation.request_comments,
            response_comments=annotation.response_comments,
        )

    def type(self, type_: TypeDescriptor) -> TypeDescription | None:
        annotation = self.registry.annotation("type", type_.name)
        if annotation is None:
            return None
        return TypeDescription(name=annotation.name, comments=annotation.comments)

    def member(self, member: MemberDescriptor) -> MemberDescription | None:
        annotation = self.registry.annotation("member", member.identity)
        if annotation is None:
            return None
        return MemberDescription(
            name=annotation.name,
            comments=annotation.comments,
            default_value=annotation.default_value,
            required=annotation.required,
            array_item_name=annotation.array_item_name,
        )

    def option(self, option: EnumOption) -> OptionDescription | None:
        annotation = self.registry.annotation("option", option.identity)
        if annotation is None:
            return None
        return OptionDescription(name=annotation.name, comments=annotation.comments)

    def status_codes(self, endpoint: EndpointDescriptor) -> list:
        return list(endpoint.status_codes)

    def headers(self, endpoint: EndpointDescriptor) -> list:
        return list(endpoint.headers)

"""Declared-schema loader.

Reads a YAML (or JSON) document describing the host's endpoints, types,
enums, modules and resources and builds an EndpointInventory from it.
Annotations found inline on each entity are collected into the registry's
annotation map, keyed by ``<kind>:<identity>``.
"""

import logging
from pathlib import Path

import yaml

from api_spec_builder.errors import InventoryError
from api_spec_builder.inventory.base import (
    Annotation,
    EndpointDescriptor,
    EndpointInventory,
    EnumDescriptor,
    EnumOption,
    HeaderSpec,
    MemberDescriptor,
    ModuleDescriptor,
    ResourceDescriptor,
    StatusCodeSpec,
    TypeDescriptor,
    TypeRegistry,
)

logger = logging.getLogger(__name__)

ANNOTATION_KEYS = (
    "comments", "default_value", "required", "array_item_name",
    "request_comments", "response_comments",
)


def load_inventory(file_path: Path) -> EndpointInventory:
    """Load an inventory document from disk."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InventoryError(f"{file_path}: {e}") from e
    if not isinstance(doc, dict):
        raise InventoryError(f"{file_path}: expected a mapping at the top level")
    return build_inventory(doc)


def build_inventory(doc: dict) -> EndpointInventory:
    """Build and validate an inventory from an already parsed document."""
    annotations: dict[str, Annotation] = {}
    enums = _parse_enums(doc.get("enums", []), annotations)
    types = _parse_types(doc.get("types", []), annotations)
    endpoints = [_parse_endpoint(e, annotations) for e in doc.get("endpoints", [])]
    registry = TypeRegistry(types=types, enums=enums, annotations=annotations)

    inventory = EndpointInventory(
        registry=registry,
        endpoints=endpoints,
        modules=[ModuleDescriptor(**m) for m in doc.get("modules", [])],
        resources=[ResourceDescriptor(**r) for r in doc.get("resources", [])],
    )
    _check_references(inventory)
    logger.debug(
        "Loaded %d endpoints, %d types, %d enums",
        len(endpoints), len(types), len(enums),
    )
    return inventory


def _annotate(annotations: dict[str, Annotation], key: str, data: dict) -> None:
    # "name" on an entity is its identity; a display name goes in "title".
    values = {k: data[k] for k in ANNOTATION_KEYS if k in data}
    if "title" in data:
        values["name"] = data["title"]
    if values:
        annotations[key] = Annotation(**values)


def _require(data: dict, key: str, where: str):
    if key not in data:
        raise InventoryError(f"{where}: missing '{key}'")
    return data[key]


def _split_type(ref: str) -> tuple[str, bool]:
    """'Order[]' or 'list[Order]' -> ('Order', True)."""
    ref = ref.strip()
    if ref.endswith("[]"):
        return ref[:-2], True
    if ref.startswith("list[") and ref.endswith("]"):
        return ref[5:-1], True
    return ref, False


def _parse_enums(items: list[dict], annotations: dict[str, Annotation]) -> dict[str, EnumDescriptor]:
    enums = {}
    for item in items:
        name = _require(item, "name", "enum")
        options = []
        for index, option in enumerate(item.get("options", [])):
            if isinstance(option, str):
                option = {"name": option, "value": index}
            enum_option = EnumOption(
                enum=name,
                name=_require(option, "name", f"enum {name}"),
                value=option.get("value", index),
                hidden=option.get("hidden", False),
            )
            _annotate(annotations, f"option:{enum_option.identity}", option)
            options.append(enum_option)
        enums[name] = EnumDescriptor(name=name, options=tuple(options))
    return enums


def _parse_types(items: list[dict], annotations: dict[str, Annotation]) -> dict[str, TypeDescriptor]:
    types = {}
    for item in items:
        name = _require(item, "name", "type")
        if name in types:
            raise InventoryError(f"Duplicate type '{name}'")
        members = []
        for member in item.get("members", []):
            member_name = _require(member, "name", f"type {name}")
            element, is_array = _split_type(_require(member, "type", f"member {name}.{member_name}"))
            descriptor = MemberDescriptor(
                declaring_type=name,
                name=member_name,
                type=element.rstrip("?"),  # nullable enums unwrap to the enum
                is_array=is_array,
                hidden=member.get("hidden", False),
                auto_bound=member.get("auto_bound", False),
                querystring=member.get("querystring", False),
                url_parameter=member.get("url_parameter", False),
            )
            _annotate(annotations, f"member:{descriptor.identity}", member)
            members.append(descriptor)
        types[name] = TypeDescriptor(
            name=name,
            namespace=item.get("namespace", ""),
            hidden=item.get("hidden", False),
            members=tuple(members),
        )
        _annotate(annotations, f"type:{name}", item)
    return types


def _parse_endpoint(item: dict, annotations: dict[str, Annotation]) -> EndpointDescriptor:
    handler = _require(item, "handler", "endpoint")
    where = f"endpoint {handler}"
    verbs = item.get("verbs") or [item.get("verb", "GET")]
    input_type, input_is_array = _split_type(item["input"]) if item.get("input") else (None, False)
    output_type, output_is_array = _split_type(item["output"]) if item.get("output") else (None, False)

    endpoint = EndpointDescriptor(
        handler=handler,
        method=_require(item, "method", where),
        verbs=tuple(v.upper() for v in verbs),
        route=_require(item, "route", where),
        input_type=input_type,
        input_is_array=input_is_array,
        output_type=output_type,
        output_is_array=output_is_array,
        hidden=item.get("hidden", False),
        handler_hidden=item.get("handler_hidden", False),
        status_codes=tuple(StatusCodeSpec(**s) for s in item.get("status_codes", [])),
        headers=tuple(HeaderSpec(**h) for h in item.get("headers", [])),
    )
    _annotate(annotations, f"endpoint:{endpoint.identity}", item)
    return endpoint


def _check_references(inventory: EndpointInventory) -> None:
    registry = inventory.registry

    def known(ref: str) -> bool:
        return registry.is_primitive(ref) or registry.is_enum(ref) or registry.is_complex(ref)

    for type_ in registry.types.values():
        for member in type_.members:
            if not known(member.type):
                raise InventoryError(f"{member.identity}: unknown type '{member.type}'")
    for endpoint in inventory.endpoints:
        for ref in (endpoint.input_type, endpoint.output_type):
            if ref is not None and not known(ref):
                raise InventoryError(f"{endpoint.identity}: unknown type '{ref}'")

"""Generation settings: naming conventions, orphan policies, overrides."""

import re
from enum import Enum
from pathlib import Path
from typing import Callable

import yaml
from pydantic import BaseModel, ConfigDict, Field

from api_spec_builder.description.assembler import Overrides
from api_spec_builder.errors import SpecificationError
from api_spec_builder.inventory.base import (
    EndpointDescriptor,
    ModuleDescriptor,
    ResourceDescriptor,
    TypeDescriptor,
)


class OrphanPolicy(str, Enum):
    EXCLUDE = "exclude"
    USE_DEFAULT = "use_default"
    FAIL = "fail"


class EnumValueMode(str, Enum):
    NAME = "name"  # emit the declared option name
    VALUE = "value"  # emit the underlying literal


def default_module_factory(endpoint: EndpointDescriptor) -> ModuleDescriptor | None:
    return None


def default_resource_factory(endpoint: EndpointDescriptor) -> ResourceDescriptor | None:
    segments = [s for s in endpoint.route.strip("/").split("/") if s and not s.startswith("{")]
    if not segments:
        return None
    return ResourceDescriptor(name=segments[0])


def type_id_convention(type_: TypeDescriptor) -> str:
    return type_.full_name


def input_type_id_convention(type_: TypeDescriptor, endpoint: EndpointDescriptor) -> str:
    return f"{type_.full_name}-{endpoint.identity}"


class Configuration(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str | None = None
    comments: str | None = None
    orphaned_module_endpoints: OrphanPolicy = OrphanPolicy.USE_DEFAULT
    orphaned_resource_endpoints: OrphanPolicy = OrphanPolicy.USE_DEFAULT
    enum_value: EnumValueMode = EnumValueMode.NAME
    merge_specification_path: Path | None = None

    default_module_factory: Callable[[EndpointDescriptor], ModuleDescriptor | None] = default_module_factory
    default_resource_factory: Callable[[EndpointDescriptor], ResourceDescriptor | None] = default_resource_factory
    type_id_convention: Callable[[TypeDescriptor], str] = type_id_convention
    input_type_id_convention: Callable[[TypeDescriptor, EndpointDescriptor], str] = input_type_id_convention
    overrides: Overrides = Field(default_factory=Overrides)


SETTING_KEYS = {
    "name", "comments", "orphaned_module_endpoints",
    "orphaned_resource_endpoints", "enum_value", "merge_specification_path",
}


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).replace("-", "_").lower()


def load_configuration(file_path: Path, **kwargs) -> Configuration:
    """Read scalar settings from a YAML file.

    Keys may be written snake_case, kebab-case or camelCase. Callables and
    overrides can't be expressed in YAML and are passed through ``kwargs``.
    """
    data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise SpecificationError(f"{file_path}: expected a mapping of settings")

    settings = {}
    for key, value in data.items():
        name = _snake(key)
        if name not in SETTING_KEYS:
            raise SpecificationError(f"{file_path}: unknown setting '{key}'")
        settings[name] = value
    settings.update(kwargs)
    return Configuration(**settings)

"""Input models describing the host framework's endpoints and types.

The loader builds these once from declared schemas; everything downstream
treats them as a read-only snapshot.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PRIMITIVES = {
    "string", "char", "boolean", "byte", "short", "int", "long",
    "float", "double", "decimal", "dateTime", "date", "time",
    "duration", "uuid", "base64Binary", "anyURI", "object",
}

ROUTE_PARAMETER = re.compile(r"\{(\w+)\??\}")


class Annotation(BaseModel):
    """Description metadata attached to an entity at registration time."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    comments: str | None = None
    default_value: Any = None
    required: bool | None = None
    array_item_name: str | None = None
    request_comments: str | None = None
    response_comments: str | None = None


class EnumOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    enum: str
    name: str
    value: Any
    hidden: bool = False

    @property
    def identity(self) -> str:
        return f"{self.enum}.{self.name}"


class EnumDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    options: tuple[EnumOption, ...] = ()


class MemberDescriptor(BaseModel):
    """A single member of a complex type with its classification flags."""

    model_config = ConfigDict(frozen=True)

    declaring_type: str
    name: str
    type: str  # element type when is_array
    is_array: bool = False
    hidden: bool = False
    auto_bound: bool = False
    querystring: bool = False
    url_parameter: bool = False

    @property
    def identity(self) -> str:
        return f"{self.declaring_type}.{self.name}"


class TypeDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = ""
    hidden: bool = False
    members: tuple[MemberDescriptor, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    def member(self, name: str) -> MemberDescriptor:
        """Look up a member by name, raising KeyError when absent."""
        for member in self.members:
            if member.name == name:
                return member
        raise KeyError(f"{self.full_name} has no member '{name}'")


class ModuleDescriptor(BaseModel):
    """Grouping descriptor for a module; equal descriptors are one module."""

    model_config = ConfigDict(frozen=True)

    name: str
    comments: str | None = None
    namespace: str = ""


class ResourceDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    comments: str | None = None
    namespace: str = ""
    handler: str | None = None


class HeaderSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "request"  # request / response
    name: str
    comments: str | None = None
    optional: bool = False


class StatusCodeSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: int
    name: str
    comments: str | None = None


class EndpointDescriptor(BaseModel):
    """One routed operation as registered with the host framework."""

    model_config = ConfigDict(frozen=True)

    handler: str  # dotted handler type, e.g. app.users.UserHandler
    method: str  # handler method name
    verbs: tuple[str, ...]
    route: str  # users/{id}
    input_type: str | None = None
    input_is_array: bool = False
    output_type: str | None = None
    output_is_array: bool = False
    hidden: bool = False
    handler_hidden: bool = False
    status_codes: tuple[StatusCodeSpec, ...] = ()
    headers: tuple[HeaderSpec, ...] = ()

    @property
    def identity(self) -> str:
        return f"{self.handler}.{self.method}"

    @property
    def namespace(self) -> str:
        return self.handler.rpartition(".")[0]

    @property
    def route_parameters(self) -> list[str]:
        return ROUTE_PARAMETER.findall(self.route)

    @property
    def has_input(self) -> bool:
        return self.input_type is not None

    @property
    def has_output(self) -> bool:
        return self.output_type is not None

    def allows(self, *verbs: str) -> bool:
        allowed = {v.upper() for v in self.verbs}
        return any(v.upper() in allowed for v in verbs)


class TypeRegistry(BaseModel):
    """Type identity -> descriptor lookups plus the annotation map."""

    types: dict[str, TypeDescriptor] = Field(default_factory=dict)
    enums: dict[str, EnumDescriptor] = Field(default_factory=dict)
    annotations: dict[str, Annotation] = Field(default_factory=dict)

    def is_primitive(self, name: str) -> bool:
        return name in PRIMITIVES

    def is_enum(self, name: str) -> bool:
        return name in self.enums

    def is_complex(self, name: str) -> bool:
        return name in self.types

    def get_type(self, name: str) -> TypeDescriptor:
        return self.types[name]

    def annotation(self, kind: str, identity: str) -> Annotation | None:
        return self.annotations.get(f"{kind}:{identity}")


class EndpointInventory(BaseModel):
    """Everything one generation call reads."""

    registry: TypeRegistry = Field(default_factory=TypeRegistry)
    endpoints: list[EndpointDescriptor] = Field(default_factory=list)
    modules: list[ModuleDescriptor] = Field(default_factory=list)
    resources: list[ResourceDescriptor] = Field(default_factory=list)

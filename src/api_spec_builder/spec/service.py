"""Builds the specification document from an endpoint inventory."""

import logging
from pathlib import Path
from typing import Protocol

from api_spec_builder.config import Configuration
from api_spec_builder.description.assembler import DescriptionAssembler
from api_spec_builder.description.conventions import Conventions, EntityKind
from api_spec_builder.errors import SpecificationError
from api_spec_builder.inventory.base import EndpointInventory
from api_spec_builder.spec.endpoints import EndpointAssembler
from api_spec_builder.spec.models import Module, Resource, Specification
from api_spec_builder.spec.orphans import EndpointMapping, OrphanResolver
from api_spec_builder.spec.types import TypeAssembler

logger = logging.getLogger(__name__)


class MergeService(Protocol):
    def merge(self, specification: Specification, path: Path) -> Specification: ...


class SpecificationAssembler:
    """Turns an inventory into a Specification.

    Each ``generate`` call works on its own intermediate state; the
    assembler can be reused.
    """

    def __init__(
        self,
        inventory: EndpointInventory,
        configuration: Configuration | None = None,
        conventions: Conventions | None = None,
        merge_service: MergeService | None = None,
    ):
        self.inventory = inventory
        self.configuration = configuration or Configuration()
        self.conventions = conventions or Conventions(inventory)
        self.merge_service = merge_service

        self.descriptions = DescriptionAssembler(self.conventions, self.configuration.overrides)
        self.orphans = OrphanResolver(self.configuration, self.conventions)
        self.types = TypeAssembler(inventory.registry, self.configuration, self.descriptions)
        self.endpoints = EndpointAssembler(inventory.registry, self.descriptions, self.types)

    def generate(self) -> Specification:
        mappings = self.orphans.resolve(self.inventory.endpoints)
        logger.info("Assembling specification for %d endpoints", len(mappings))

        specification = Specification(
            name=self.configuration.name,
            comments=self.configuration.comments,
            types=self.types.catalog([m.endpoint for m in mappings]),
            modules=self.modules([m for m in mappings if m.module is not None]),
            resources=self.resources([m for m in mappings if m.module is None]),
        )

        path = self.configuration.merge_specification_path
        if path:
            if self.merge_service is None:
                raise SpecificationError(f"A merge service is required to merge with {path}")
            logger.info("Merging with %s", path)
            specification = self.merge_service.merge(specification, path)
        return specification

    def modules(self, mappings: list[EndpointMapping]) -> list[Module]:
        modules = [
            self.descriptions.finish(
                EntityKind.MODULE,
                module,
                Module(name=module.name, comments=module.comments, resources=self.resources(group)),
            )
            for module, group in _group(mappings, "module")
        ]
        return sorted(modules, key=lambda m: m.name)

    def resources(self, mappings: list[EndpointMapping]) -> list[Resource]:
        resources = [
            self.descriptions.finish(
                EntityKind.RESOURCE,
                resource,
                Resource(
                    name=resource.name,
                    comments=resource.comments,
                    endpoints=self.endpoints.build_endpoints([m.endpoint for m in group]),
                ),
            )
            for resource, group in _group(mappings, "resource")
        ]
        return sorted(resources, key=lambda r: r.name)


def _group(mappings: list[EndpointMapping], axis: str):
    """Group by descriptor, keeping first-seen order."""
    groups: dict = {}
    for mapping in mappings:
        groups.setdefault(getattr(mapping, axis), []).append(mapping)
    return groups.items()

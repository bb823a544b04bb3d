"""Errors raised while building a specification."""


class SpecificationError(Exception):
    """Base class for configuration and inventory errors."""


class InventoryError(SpecificationError):
    """The declared schema document is malformed."""


class OrphanedEndpointsError(SpecificationError):
    """Endpoints without a module or resource under the ``fail`` policy."""

    axis = ""

    def __init__(self, endpoints: list[str]):
        self.endpoints = list(endpoints)
        super().__init__(
            f"The following endpoints are not assigned to a {self.axis}: "
            + ", ".join(self.endpoints)
        )


class OrphanedModuleEndpoints(OrphanedEndpointsError):
    axis = "module"


class OrphanedResourceEndpoints(OrphanedEndpointsError):
    axis = "resource"

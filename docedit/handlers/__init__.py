"""Registry assembly for every supported document domain.

Each domain package exposes ``build_registries()`` returning its registries.
:func:`build_registries` collects them, checks tool names are unique, freezes
every registry and returns a read-only mapping keyed by tool name. Building
happens once at startup; the result is shared by all calls.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping

from docedit.exceptions import RegistryError
from docedit.handlers import email, excel, pdf, powerpoint, word
from docedit.logger import session_logger
from docedit.operations import OperationRegistry

DOMAIN_PACKAGES = (excel, word, powerpoint, pdf, email)


def build_registries() -> Mapping[str, OperationRegistry]:
    """Build and freeze all registries.

    Raises:
        RegistryError: If two registries share a tool name
        DuplicateOperationError: If a registry lists the same operation twice
    """
    registries: Dict[str, OperationRegistry] = {}
    for package in DOMAIN_PACKAGES:
        for registry in package.build_registries():
            if registry.name in registries:
                raise RegistryError(
                    f"Tool name '{registry.name}' is provided by more than one registry",
                    details={"registry": registry.name},
                )
            registries[registry.name] = registry.freeze()

    session_logger.debug(
        "Registries built",
        registries=len(registries),
        operations=sum(len(registry) for registry in registries.values()),
    )
    return MappingProxyType(registries)


def registries_for_domain(
    registries: Mapping[str, OperationRegistry], domain: str
) -> List[OperationRegistry]:
    return [registry for registry in registries.values() if registry.domain == domain]


__all__ = ["build_registries", "registries_for_domain", "DOMAIN_PACKAGES"]

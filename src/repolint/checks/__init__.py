"""Check registry.

Every check module defines ``ID``, ``WEIGHT``, ``CHECK_SETS``, optionally
``SCORECARD_NAME``, and a ``check(input) -> CheckOutput`` function. The
registry is built once at import and is read-only afterwards.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType, ModuleType

from pydantic import ValidationError

from repolint.checks import (
    binary_artifacts,
    code_of_conduct,
    code_review,
    dangerous_workflow,
    dco,
    dependency_update_tool,
    get_started,
    gitignore,
    issue_template,
    maintained,
    pr_template,
    security_policy,
    signed_releases,
    token_permissions,
)
from repolint.models.schemas import CheckInput, CheckMetadata, CheckOutput


class RegistryError(Exception):
    """Raised when the check registry is misconfigured."""


class UnknownCheckError(KeyError):
    """Raised when looking up a check id that is not registered."""

    def __init__(self, check_id: str) -> None:
        self.check_id = check_id
        super().__init__(f"Unknown check: {check_id}")


@dataclass(frozen=True)
class RegisteredCheck:
    """A check function bound to its static metadata."""

    metadata: CheckMetadata
    check: Callable[[CheckInput], CheckOutput]

    @property
    def id(self) -> str:
        return self.metadata.id


def build_registry(modules: Iterable[ModuleType]) -> Mapping[str, RegisteredCheck]:
    """Build a read-only registry from check modules.

    Raises:
        RegistryError: On duplicate ids or invalid metadata.
    """
    registry: dict[str, RegisteredCheck] = {}
    for module in modules:
        try:
            metadata = CheckMetadata(
                id=module.ID,
                weight=module.WEIGHT,
                check_sets=module.CHECK_SETS,
                scorecard_name=getattr(module, "SCORECARD_NAME", None),
            )
        except (AttributeError, ValidationError) as e:
            raise RegistryError(f"Invalid check module {module.__name__}: {e}") from e
        if metadata.id in registry:
            raise RegistryError(f"Duplicate check id: {metadata.id}")
        registry[metadata.id] = RegisteredCheck(metadata=metadata, check=module.check)
    return MappingProxyType(registry)


CHECKS = build_registry(
    [
        binary_artifacts,
        code_of_conduct,
        code_review,
        dangerous_workflow,
        dco,
        dependency_update_tool,
        get_started,
        gitignore,
        issue_template,
        maintained,
        pr_template,
        security_policy,
        signed_releases,
        token_permissions,
    ]
)


def get_check(check_id: str) -> RegisteredCheck:
    """Get a registered check by id."""
    try:
        return CHECKS[check_id]
    except KeyError:
        raise UnknownCheckError(check_id) from None


def get_metadata(check_id: str) -> CheckMetadata:
    """Get the metadata of a registered check."""
    return get_check(check_id).metadata


def scorecard_names() -> list[str]:
    """Scorecard check names required by the registered checks."""
    return sorted(c.metadata.scorecard_name for c in CHECKS.values() if c.metadata.scorecard_name)


__all__ = [
    "CHECKS",
    "RegisteredCheck",
    "RegistryError",
    "UnknownCheckError",
    "build_registry",
    "get_check",
    "get_metadata",
    "scorecard_names",
]

"""Errors raised while resolving and transferring dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from .models import Dependency


class DependencyError(Exception):
    """Base class for all dependency resolution errors."""

    def __init__(self, message: str, dependency: Dependency | None = None) -> None:
        super().__init__(message)
        self.dependency: Dependency | None = dependency


class ArtifactNotFoundError(DependencyError):
    """Raised when an artifact is absent from every location that was tried."""

    def __init__(self, dependency: Dependency | None, locations: str | Iterable[str]) -> None:
        if isinstance(locations, str):
            locations = [locations]
        self.locations: list[str] = list(locations)
        super().__init__(f"Couldn't find artifact for dependency '{dependency}' at {','.join(self.locations)}", dependency)


class ArtifactRetrievalError(DependencyError):
    """Raised for an IO or HTTP failure that is not a simple absence."""

    def __init__(self, dependency: Dependency | None, location: str, reason: str = "") -> None:
        self.location: str = location
        message = f"Unexpected error while retrieving artifact for dependency '{dependency}' from '{location}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, dependency)


class DependencyXmlParsingError(DependencyError):
    """Raised when a metadata or descriptor document can't be interpreted."""

    def __init__(self, dependency: Dependency | None, location: str, errors: Iterable[str]) -> None:
        self.location: str = location
        self.errors: list[str] = list(errors)
        super().__init__(
            f"Unable to parse artifact document for dependency '{dependency}' from '{location}': "
            + "; ".join(self.errors),
            dependency,
        )


class DependencyTransferError(DependencyError):
    """Raised when copying or downloading an artifact to its destination fails."""

    def __init__(self, dependency: Dependency | None, location: str, destination: Path) -> None:
        self.location: str = location
        self.destination: Path = destination
        super().__init__(
            f"Unable to transfer dependency '{dependency}' from '{location}' into '{destination}'",
            dependency,
        )

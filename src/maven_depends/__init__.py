"""The `maven-depends` APIs."""

__version__ = "0.1.0"

from .dependency_set import DependencySet
from .exceptions import (
    ArtifactNotFoundError,
    ArtifactRetrievalError,
    DependencyError,
    DependencyTransferError,
    DependencyXmlParsingError,
)
from .graph import DependencyGraph
from .metadata import MavenMetadata
from .models import Dependency, Exclusion, LocalDependency, PomDependency, Scope
from .pom import MavenPom
from .repository import MAVEN_CENTRAL, MAVEN_LOCAL, Repository, RepositoryArtifact
from .resolver import DependencyResolver
from .retrieval import RepositoryReader
from .scopes import DependencyScopes
from .transfer import TransferOutcome
from .version import VersionNumber

__all__ = [
    "MAVEN_CENTRAL",
    "MAVEN_LOCAL",
    "ArtifactNotFoundError",
    "ArtifactRetrievalError",
    "Dependency",
    "DependencyError",
    "DependencyGraph",
    "DependencyResolver",
    "DependencyScopes",
    "DependencySet",
    "DependencyTransferError",
    "DependencyXmlParsingError",
    "Exclusion",
    "LocalDependency",
    "MavenMetadata",
    "MavenPom",
    "PomDependency",
    "Repository",
    "RepositoryArtifact",
    "RepositoryReader",
    "Scope",
    "TransferOutcome",
    "VersionNumber",
]

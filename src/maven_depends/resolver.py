"""Resolution of one dependency within a list of Maven-compatible repositories."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from .dependency_set import DependencySet
from .exceptions import ArtifactNotFoundError, ArtifactRetrievalError, DependencyXmlParsingError
from .graph import DependencyGraph
from .metadata import MavenMetadata
from .models import PomDependency, Scope
from .pom import MavenPom
from .repository import RepositoryArtifact
from .retrieval import RepositoryReader
from .transfer import ArtifactTransfer
from .version import VersionNumber

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path

    from .models import Dependency
    from .repository import Repository
    from .transfer import TransferOutcome

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Resolve a dependency within a list of repositories, checked in the order they're listed.

    The version index and the snapshot version index are fetched at most once
    per resolver and kept for its lifetime; create a new resolver to see fresh
    repository data. A resolver is meant to be used from one thread at a time.
    """

    def __init__(
        self,
        repositories: Sequence[Repository] | None,
        dependency: Dependency,
        reader: RepositoryReader | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            repositories: Repositories to search, in priority order
            dependency: The dependency to resolve
            reader: Reader for repository locations, shared with the resolvers this one creates

        """
        self.repositories: list[Repository] = list(repositories or ())
        self.dependency: Dependency = dependency
        self.reader: RepositoryReader = reader if reader is not None else RepositoryReader()
        self._metadata: MavenMetadata | None = None
        self._snapshot_metadata: MavenMetadata | None = None

    def exists(self) -> bool:
        """Check whether the dependency, and its version when one was requested, is in any repository.

        This is a probe: a missing or unreadable version index answers False
        instead of raising.
        """
        try:
            metadata = self.get_maven_metadata()
        except (ArtifactNotFoundError, ArtifactRetrievalError) as e:
            logger.debug("%s doesn't exist: %s", self.dependency, e)
            return False
        if self.dependency.version != VersionNumber.UNKNOWN:
            return self.dependency.version in metadata.versions
        return True

    def resolve_version(self) -> VersionNumber:
        """Return the requested version, or the latest available one when none was requested.

        Returns:
            The version, :attr:`VersionNumber.UNKNOWN` when nothing was requested and
            the dependency couldn't be found

        """
        version = self.dependency.version
        if version == VersionNumber.UNKNOWN:
            return self.latest_version()
        return version

    def list_versions(self) -> list[VersionNumber]:
        """Return every version listed in the version index, empty when the dependency can't be found."""
        try:
            return list(self.get_maven_metadata().versions)
        except ArtifactNotFoundError:
            return []

    def latest_version(self) -> VersionNumber:
        """Return the latest stable version, UNKNOWN when the dependency can't be found."""
        try:
            return self.get_maven_metadata().latest
        except ArtifactNotFoundError:
            return VersionNumber.UNKNOWN

    def release_version(self) -> VersionNumber:
        """Return the release version, UNKNOWN when the dependency can't be found."""
        try:
            return self.get_maven_metadata().release
        except ArtifactNotFoundError:
            return VersionNumber.UNKNOWN

    def get_direct_dependencies(self, *scopes: Scope) -> DependencySet:
        """Return the dependencies the descriptor declares directly for the requested scopes."""
        pom = self.get_maven_pom(PomDependency.from_dependency(self.dependency))
        return DependencySet(d.to_dependency() for d in pom.get_dependencies(*scopes))

    def get_all_dependencies(self, *scopes: Scope) -> DependencySet:
        """Return the transitive dependencies for the requested scopes, including this dependency.

        Every artifact identity appears once, at the version that was reached
        first in breadth-first order. This queries a descriptor for every
        dependency that is found, so it can be slow.
        """
        return DependencySet(dependency for _, dependency in self._traverse(scopes))

    def get_dependency_graph(self, *scopes: Scope) -> DependencyGraph:
        """Resolve like :meth:`get_all_dependencies` but keep which dependency introduced which."""
        graph = DependencyGraph()
        for introducer, dependency in self._traverse(scopes):
            graph.add_dependency(introducer, dependency)
        return graph

    def _traverse(self, scopes: Sequence[Scope]) -> Iterator[tuple[Dependency | None, Dependency]]:
        result = DependencySet([self.dependency])
        yield None, self.dependency

        queue: deque[PomDependency] = deque()
        parent: PomDependency | None = PomDependency.from_dependency(self.dependency)
        children = self.get_maven_pom(parent).get_dependencies(*scopes)

        while parent is not None:
            queued = set(queue)
            exclusion_context = parent
            queue.extend(c for c in children if c not in queued and not self._matches_exclusions(exclusion_context, c))

            # stop unless a dependency that isn't part of the result yet is found
            parent = None
            while queue:
                candidate = queue.popleft()
                dependency = candidate.to_dependency()
                if not result.add(dependency):
                    continue
                introducer = candidate.parent.to_dependency() if candidate.parent is not None else self.dependency
                yield introducer, dependency

                parent = candidate
                resolver = DependencyResolver(self.repositories, dependency, reader=self.reader)
                children = resolver.get_maven_pom(candidate).get_dependencies(*scopes)
                break

    def _matches_exclusions(self, context: PomDependency, checked: PomDependency) -> bool:
        if context.is_excluded(checked):
            return True
        return any(exclusion.matches(checked) for exclusion in self.dependency.exclusions)

    def transfer_into_directory(
        self,
        directory: Path | str,
        progress: Callable[[str, TransferOutcome], None] | None = None,
    ) -> Path:
        """Transfer the artifact into an existing, writable directory.

        Locations are tried in repository order and the first one that has the
        artifact wins.

        Args:
            directory: Destination directory
            progress: Called with every attempted location and its outcome

        Returns:
            The transferred file

        """
        transfer = ArtifactTransfer(self.dependency, self._get_transfer_artifacts(), self.reader)
        return transfer.into_directory(directory, progress)

    def get_transfer_locations(self) -> list[str]:
        """Return every location the artifact would be transferred from, without transferring."""
        return [artifact.location for artifact in self._get_transfer_artifacts()]

    def get_maven_metadata(self) -> MavenMetadata:
        """Return the version index of this dependency, fetching it on first use."""
        if self._metadata is None:
            self._metadata = self._parse_maven_metadata(self._get_metadata_locations())
        return self._metadata

    def get_snapshot_maven_metadata(self) -> MavenMetadata | None:
        """Return the version index of the snapshot version, or None when the version isn't a snapshot."""
        if self._snapshot_metadata is None:
            version = self.resolve_version()
            if version.is_snapshot():
                self._snapshot_metadata = self._parse_maven_metadata(self._get_snapshot_metadata_locations())
        return self._snapshot_metadata

    def get_maven_pom(self, context: PomDependency | None = None) -> MavenPom:
        """Fetch and parse the descriptor of this dependency.

        Args:
            context: The descriptor entry this dependency was reached through

        """
        artifact, document = self.reader.read_first(self._get_pom_locations(), self.dependency)
        pom = MavenPom(context, self.repositories, self.reader)
        if not pom.process(document):
            raise DependencyXmlParsingError(self.dependency, artifact.location, pom.errors)
        return pom

    def _parse_maven_metadata(self, artifacts: list[RepositoryArtifact]) -> MavenMetadata:
        artifact, document = self.reader.read_first(artifacts, self.dependency)
        metadata = MavenMetadata()
        if not metadata.process(document):
            raise DependencyXmlParsingError(self.dependency, artifact.location, metadata.errors)
        return metadata

    def _artifact_version(self, version: VersionNumber) -> VersionNumber:
        if version.is_snapshot():
            metadata = self.get_snapshot_maven_metadata()
            if metadata is not None and metadata.snapshot != VersionNumber.UNKNOWN:
                return metadata.snapshot
        return version

    def _get_artifact_locations(self) -> list[RepositoryArtifact]:
        return [
            RepositoryArtifact(repository, repository.get_artifact_location(self.dependency))
            for repository in self.repositories
        ]

    def _get_metadata_locations(self) -> list[RepositoryArtifact]:
        return [a.append_path(a.repository.get_metadata_name()) for a in self._get_artifact_locations()]

    def _get_snapshot_metadata_locations(self) -> list[RepositoryArtifact]:
        version = self.resolve_version()
        return [a.append_path(f"{version}/{a.repository.get_metadata_name()}") for a in self._get_artifact_locations()]

    def _get_pom_locations(self) -> list[RepositoryArtifact]:
        version = self.resolve_version()
        artifact_version = self._artifact_version(version)
        artifact_id = self.dependency.artifact_id
        return [a.append_path(f"{version}/{artifact_id}-{artifact_version}.pom") for a in self._get_artifact_locations()]

    def _get_transfer_artifacts(self) -> list[RepositoryArtifact]:
        version = self.resolve_version()
        artifact_version = self._artifact_version(version)
        filename = f"{self.dependency.artifact_id}-{artifact_version}"
        if self.dependency.classifier:
            filename += f"-{self.dependency.classifier}"
        filename += f".{self.dependency.type}"
        return [a.append_path(f"{version}/{filename}") for a in self._get_artifact_locations()]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.repositories!r}, {self.dependency!r})"

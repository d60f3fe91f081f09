"""Core data models for declared dependencies."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from .version import VersionNumber

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

TYPE_JAR = "jar"
TYPE_POM = "pom"
WILDCARD = "*"

DEPENDENCY_PATTERN = re.compile(
    r"^(?P<group_id>[^:@]+):(?P<artifact_id>[^:@]+)"
    r"(?::(?P<version>[^:@]+)(?::(?P<classifier>[^:@]+))?)?"
    r"(?:@(?P<type>[^:@]+))?$"
)


class Scope(str, Enum):
    """Usage classification of a dependency."""

    compile = "compile"
    runtime = "runtime"
    standalone = "standalone"
    test = "test"

    @classmethod
    def lookup(cls, name: str | None) -> Scope | None:
        """Return the scope with this name, or None for scopes we don't track (provided, system, import)."""
        try:
            return cls(name)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


class Exclusion:
    """A group/artifact pattern that suppresses a dependency and its subtree."""

    def __init__(self, group_id: str, artifact_id: str = WILDCARD) -> None:
        """Initialize an exclusion.

        Args:
            group_id: Group to exclude, or ``*`` for any group
            artifact_id: Artifact to exclude, or ``*`` for any artifact

        """
        self.group_id: str = group_id
        self.artifact_id: str = artifact_id

    def matches(self, dependency: Dependency | PomDependency) -> bool:
        """Check whether the candidate's group/artifact pair is matched by this exclusion."""
        return (self.group_id in (WILDCARD, dependency.group_id)) and (
            self.artifact_id in (WILDCARD, dependency.artifact_id)
        )

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Exclusion) and (self.group_id, self.artifact_id) == (
            other.group_id,
            other.artifact_id,
        )

    def __hash__(self) -> int:
        return hash((self.group_id, self.artifact_id))

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.group_id!r}, {self.artifact_id!r})"


class Dependency:
    """A declared dependency on a Maven artifact.

    Identity is ``(group_id, artifact_id, classifier, type)``; the version is
    deliberately not part of it so that two versions of the same artifact
    collide in a :class:`~maven_depends.dependency_set.DependencySet`.
    """

    def __init__(  # noqa: PLR0913
        self,
        group_id: str,
        artifact_id: str,
        version: VersionNumber | str | None = None,
        classifier: str | None = "",
        type: str | None = TYPE_JAR,  # noqa: A002
        exclusions: Iterable[Exclusion] = (),
    ) -> None:
        """Initialize a dependency.

        Args:
            group_id: Maven group id
            artifact_id: Maven artifact id
            version: Requested version, ``None`` to resolve the latest one
            classifier: Artifact classifier, empty for none
            type: Artifact type, ``jar`` by default
            exclusions: Exclusions applied to the transitive dependencies

        """
        if not isinstance(version, VersionNumber):
            version = VersionNumber.parse(version)
        self.group_id: str = group_id
        self.artifact_id: str = artifact_id
        self.version: VersionNumber = version
        self.classifier: str = classifier or ""
        self.type: str = type or TYPE_JAR
        self.exclusions: frozenset[Exclusion] = frozenset(exclusions)

    @classmethod
    def parse(cls, description: str | None) -> Dependency | None:
        """Parse ``groupId:artifactId[:version[:classifier]][@type]``.

        Returns:
            The dependency, or None when the description is malformed

        """
        if not description:
            return None
        match = DEPENDENCY_PATTERN.match(description.strip())
        if match is None:
            return None
        return cls(
            match.group("group_id"),
            match.group("artifact_id"),
            match.group("version"),
            match.group("classifier"),
            match.group("type"),
        )

    def with_version(self, version: VersionNumber) -> Dependency:
        """Return a copy of this dependency pinned to another version."""
        return Dependency(self.group_id, self.artifact_id, version, self.classifier, self.type, self.exclusions)

    def exclude(self, *exclusions: Exclusion) -> Dependency:
        """Return a copy of this dependency with additional exclusions."""
        return Dependency(
            self.group_id,
            self.artifact_id,
            self.version,
            self.classifier,
            self.type,
            self.exclusions.union(exclusions),
        )

    @property
    def identity(self) -> tuple[str, str, str, str]:
        return self.group_id, self.artifact_id, self.classifier, self.type

    def to_obj(self) -> dict[str, str | list[str]]:
        """Convert the dependency to a dictionary representation."""
        return {
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "version": str(self.version),
            "classifier": self.classifier,
            "type": self.type,
            "exclusions": sorted(map(str, self.exclusions)),
        }

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Dependency) and self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __str__(self) -> str:
        result = f"{self.group_id}:{self.artifact_id}"
        if self.version != VersionNumber.UNKNOWN:
            result += f":{self.version}"
        if self.classifier:
            result += f":{self.classifier}"
        if self.type and self.type != TYPE_JAR:
            result += f"@{self.type}"
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}.parse({str(self)!r})"


class LocalDependency:
    """A dependency on a local file or directory that is used as-is on the classpath."""

    def __init__(self, path: Path | str) -> None:
        if not isinstance(path, Path):
            path = Path(path)
        self.path: Path = path

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalDependency) and self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"


class PomDependency:
    """One ``<dependency>`` entry of a descriptor, linked to the entry it was reached through.

    The ``parent`` chain is walked to apply exclusions declared by any ancestor.
    """

    def __init__(  # noqa: PLR0913
        self,
        parent: PomDependency | None,
        group_id: str,
        artifact_id: str,
        version: str | None = None,
        classifier: str | None = "",
        type: str | None = TYPE_JAR,  # noqa: A002
        scope: str | None = Scope.compile.value,
        optional: bool = False,
        exclusions: Iterable[Exclusion] = (),
    ) -> None:
        self.parent: PomDependency | None = parent
        self.group_id: str = group_id
        self.artifact_id: str = artifact_id
        self.version: str | None = version
        self.classifier: str = classifier or ""
        self.type: str = type or TYPE_JAR
        self.scope: str = scope or Scope.compile.value
        self.optional: bool = optional
        self.exclusions: frozenset[Exclusion] = frozenset(exclusions)

    @classmethod
    def from_dependency(cls, dependency: Dependency, parent: PomDependency | None = None) -> PomDependency:
        """Convert a declared dependency into the root of an exclusion context."""
        version = None if dependency.version == VersionNumber.UNKNOWN else str(dependency.version)
        return cls(
            parent,
            dependency.group_id,
            dependency.artifact_id,
            version,
            dependency.classifier,
            dependency.type,
            Scope.compile.value,
            exclusions=dependency.exclusions,
        )

    def to_dependency(self) -> Dependency:
        """Convert this descriptor entry into a full dependency."""
        return Dependency(
            self.group_id,
            self.artifact_id,
            VersionNumber.parse(self.version),
            self.classifier,
            self.type,
            self.exclusions,
        )

    def ancestors(self) -> Iterator[PomDependency]:
        """Yield this entry followed by every entry it was reached through, nearest first."""
        node: PomDependency | None = self
        while node is not None:
            yield node
            node = node.parent

    def is_excluded(self, candidate: PomDependency) -> bool:
        """Check whether an exclusion declared anywhere along this chain matches the candidate."""
        return any(exclusion.matches(candidate) for node in self.ancestors() for exclusion in node.exclusions)

    @property
    def identity(self) -> tuple[str, str, str, str]:
        return self.group_id, self.artifact_id, self.classifier, self.type

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PomDependency) and self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version or ''}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.group_id!r}, {self.artifact_id!r}, {self.version!r}, "
            f"scope={self.scope!r})"
        )

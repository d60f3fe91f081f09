"""Parsing of ``.pom`` descriptors into the direct dependencies of an artifact."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .models import TYPE_JAR, TYPE_POM, Dependency, Exclusion, PomDependency, Scope
from .xml_events import XmlEventParser

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .repository import Repository
    from .retrieval import RepositoryReader

logger = logging.getLogger(__name__)

PROPERTY_REFERENCE = re.compile(r"\$\{([^}]+)\}")
MAX_EXPANSION_PASSES = 16
MAX_PARENT_DEPTH = 32

SCOPE_IMPORT = "import"
DEPENDENCY_PATHS = (
    ("project", "dependencies", "dependency"),
    ("project", "dependencyManagement", "dependencies", "dependency"),
)
COORDINATES = ("groupId", "artifactId", "version", "packaging")
DEPENDENCY_FIELDS = ("groupId", "artifactId", "version", "classifier", "type", "scope", "optional")


@dataclass
class RawDependency:
    """A ``<dependency>`` entry exactly as it was declared, before properties and management apply."""

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    classifier: str | None = None
    type: str | None = None
    scope: str | None = None
    optional: str | None = None
    exclusions: list[Exclusion] = field(default_factory=list)

    def set_field(self, name: str, value: str) -> None:
        attribute = {"groupId": "group_id", "artifactId": "artifact_id"}.get(name, name)
        setattr(self, attribute, value or None)


@dataclass
class ManagedDependency:
    version: str | None
    scope: str | None
    exclusions: list[Exclusion]


class MavenPom(XmlEventParser):
    """A parsed descriptor.

    ``context`` is the descriptor entry through which this artifact was
    reached; every dependency returned by :meth:`get_dependencies` points back
    to it so exclusions can be matched along the whole path.
    """

    def __init__(
        self,
        context: PomDependency | None = None,
        repositories: Sequence[Repository] = (),
        reader: RepositoryReader | None = None,
    ) -> None:
        super().__init__()
        self.context: PomDependency | None = context
        self.repositories: list[Repository] = list(repositories)
        self.reader: RepositoryReader | None = reader

        self.coordinates: dict[str, str] = {}
        self.parent_coordinates: dict[str, str] = {}
        self.properties: dict[str, str] = {}
        self.dependencies: list[RawDependency] = []
        self.managed_dependencies: list[RawDependency] = []

        self._dependency: RawDependency | None = None
        self._exclusion: dict[str, str] | None = None

        self._parent_pom: MavenPom | None = None
        self._resolved: list[PomDependency] | None = None

    @classmethod
    def parse(cls, document: str, context: PomDependency | None = None) -> MavenPom:
        """Parse a document that has no parent descriptor to fetch."""
        pom = cls(context)
        pom.process(document)
        return pom

    # parsing

    def start_element(self, name: str) -> None:
        if len(self.path) == 1 and name != "project":
            self.errors.append(f"unexpected root element <{name}>, expected <project>")
        elif tuple(self.path) in DEPENDENCY_PATHS:
            self._dependency = RawDependency()
        elif self._dependency is not None and name == "exclusion":
            self._exclusion = {}

    def end_element(self, name: str, text: str) -> None:  # noqa: C901
        depth = len(self.path)
        if depth == 2 and name in COORDINATES:  # noqa: PLR2004
            self.coordinates[name] = text
        elif depth == 3 and self.path[1] == "parent":  # noqa: PLR2004
            self.parent_coordinates[name] = text
        elif depth == 3 and self.path[1] == "properties":  # noqa: PLR2004
            self.properties[name] = text
        elif self._exclusion is not None and self.parent_is("exclusion"):
            self._exclusion[name] = text
        elif self._dependency is not None and self._exclusion is not None and name == "exclusion":
            self._end_exclusion(self._dependency, self._exclusion)
        elif self._dependency is not None and self.parent_is("dependency") and name in DEPENDENCY_FIELDS:
            self._dependency.set_field(name, text)
        elif self._dependency is not None and tuple(self.path) in DEPENDENCY_PATHS:
            self._end_dependency(self._dependency)

    def _end_exclusion(self, dependency: RawDependency, exclusion: dict[str, str]) -> None:
        group_id = exclusion.get("groupId")
        if not group_id:
            self.errors.append("exclusion without groupId")
        else:
            dependency.exclusions.append(Exclusion(group_id, exclusion.get("artifactId") or "*"))
        self._exclusion = None

    def _end_dependency(self, dependency: RawDependency) -> None:
        self._dependency = None
        if not dependency.group_id or not dependency.artifact_id:
            self.errors.append(
                f"dependency without groupId or artifactId ({dependency.group_id}:{dependency.artifact_id})"
            )
            return
        if "dependencyManagement" in self.path:
            self.managed_dependencies.append(dependency)
        else:
            self.dependencies.append(dependency)

    # inheritance

    @property
    def group_id(self) -> str | None:
        return self.coordinates.get("groupId") or self.parent_coordinates.get("groupId")

    @property
    def artifact_id(self) -> str | None:
        return self.coordinates.get("artifactId")

    @property
    def version(self) -> str | None:
        return self.coordinates.get("version") or self.parent_coordinates.get("version")

    def get_parent_pom(self) -> MavenPom | None:
        """Fetch the descriptor named in ``<parent>``, or None when there isn't one."""
        if self._parent_pom is None and self.parent_coordinates.get("groupId") and self.parent_coordinates.get(
            "artifactId"
        ):
            from .resolver import DependencyResolver  # noqa: PLC0415

            parent = Dependency(
                self.parent_coordinates["groupId"],
                self.parent_coordinates["artifactId"],
                self.parent_coordinates.get("version"),
                type=TYPE_POM,
            )
            logger.debug("Fetching parent descriptor %s", parent)
            self._parent_pom = DependencyResolver(self.repositories, parent, reader=self.reader).get_maven_pom()
        return self._parent_pom

    def lineage(self) -> list[MavenPom]:
        """Return this descriptor followed by its ancestors, nearest first."""
        result: list[MavenPom] = []
        seen: set[tuple[str | None, str | None, str | None]] = set()
        pom: MavenPom | None = self
        while pom is not None and len(result) < MAX_PARENT_DEPTH:
            key = (pom.group_id, pom.artifact_id, pom.version)
            if key in seen:
                logger.warning("Circular parent descriptor chain at %s:%s:%s", *key)
                break
            seen.add(key)
            result.append(pom)
            pom = pom.get_parent_pom()
        return result

    def resolved_properties(self) -> dict[str, str]:
        """Merge properties along the parent chain, nearer descriptors winning, plus the project properties."""
        properties: dict[str, str] = {}
        for pom in reversed(self.lineage()):
            properties.update(pom.properties)
        builtins = {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "version": self.version,
            "packaging": self.coordinates.get("packaging"),
            "parent.groupId": self.parent_coordinates.get("groupId"),
            "parent.artifactId": self.parent_coordinates.get("artifactId"),
            "parent.version": self.parent_coordinates.get("version"),
        }
        for name, value in builtins.items():
            if value is not None:
                properties[f"project.{name}"] = value
                properties[f"pom.{name}"] = value
        return properties

    @staticmethod
    def expand(value: str | None, properties: dict[str, str]) -> str | None:
        """Replace ``${name}`` references, leaving unknown ones as they are."""
        if value is None:
            return None
        for _ in range(MAX_EXPANSION_PASSES):
            expanded = PROPERTY_REFERENCE.sub(lambda m: properties.get(m.group(1), m.group(0)), value)
            if expanded == value:
                break
            value = expanded
        return value

    def _expanded(self, raw: RawDependency, properties: dict[str, str]) -> RawDependency:
        return RawDependency(
            group_id=self.expand(raw.group_id, properties),
            artifact_id=self.expand(raw.artifact_id, properties),
            version=self.expand(raw.version, properties),
            classifier=self.expand(raw.classifier, properties),
            type=self.expand(raw.type, properties),
            scope=self.expand(raw.scope, properties),
            optional=self.expand(raw.optional, properties),
            exclusions=list(raw.exclusions),
        )

    def resolved_management(
        self, importing: frozenset[tuple[str, str]] = frozenset()
    ) -> dict[tuple[str, str, str, str], ManagedDependency]:
        """Collect managed versions, own and inherited entries first, then imported boms."""
        importing = importing | {(self.group_id or "", self.artifact_id or "")}
        properties = self.resolved_properties()
        managed: dict[tuple[str, str, str, str], ManagedDependency] = {}
        imports: list[RawDependency] = []
        for pom in self.lineage():
            for raw in pom.managed_dependencies:
                entry = self._expanded(raw, properties)
                if entry.scope == SCOPE_IMPORT and entry.type == TYPE_POM:
                    imports.append(entry)
                    continue
                key = _key(entry)
                if key not in managed:
                    managed[key] = ManagedDependency(entry.version, entry.scope, entry.exclusions)
        for entry in imports:
            if (entry.group_id or "", entry.artifact_id or "") in importing:
                continue
            bom = self._import_bom(entry.group_id or "", entry.artifact_id or "", entry.version)
            for key, value in bom.resolved_management(importing).items():
                managed.setdefault(key, value)
        return managed

    def _import_bom(self, group_id: str, artifact_id: str, version: str | None) -> MavenPom:
        from .resolver import DependencyResolver  # noqa: PLC0415

        bom = Dependency(group_id, artifact_id, version, type=TYPE_POM)
        logger.debug("Importing managed dependencies from %s", bom)
        return DependencyResolver(self.repositories, bom, reader=self.reader).get_maven_pom()

    def resolved_dependencies(self) -> list[PomDependency]:
        """Return every non-optional dependency of this descriptor with management and properties applied."""
        if self._resolved is not None:
            return self._resolved
        properties = self.resolved_properties()
        management = self.resolved_management()
        resolved: dict[tuple[str, str, str, str], PomDependency] = {}
        for pom in self.lineage():
            for raw in pom.dependencies:
                entry = self._expanded(raw, properties)
                key = _key(entry)
                if key in resolved:
                    continue
                managed = management.get(key)
                if managed is not None:
                    entry.version = entry.version or managed.version
                    entry.scope = entry.scope or managed.scope
                    entry.exclusions = _merge_exclusions(entry.exclusions, managed.exclusions)
                if (entry.optional or "").lower() == "true":
                    continue
                group_id, artifact_id, _, _ = key
                resolved[key] = PomDependency(
                    self.context,
                    group_id,
                    artifact_id,
                    entry.version,
                    entry.classifier,
                    entry.type,
                    entry.scope,
                    optional=False,
                    exclusions=entry.exclusions,
                )
        self._resolved = list(resolved.values())
        return self._resolved

    def get_dependencies(self, *scopes: Scope) -> list[PomDependency]:
        """Return the direct dependencies in one of the requested scopes, in declaration order."""
        if not scopes:
            return []
        requested = set(scopes)
        return [d for d in self.resolved_dependencies() if Scope.lookup(d.scope) in requested]


def _key(entry: RawDependency) -> tuple[str, str, str, str]:
    return entry.group_id or "", entry.artifact_id or "", entry.classifier or "", entry.type or TYPE_JAR


def _merge_exclusions(declared: Iterable[Exclusion], managed: Iterable[Exclusion]) -> list[Exclusion]:
    result = list(declared)
    result.extend(e for e in managed if e not in result)
    return result

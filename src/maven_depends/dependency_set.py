"""Ordered, duplicate-rejecting collections of dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tqdm import tqdm

from .models import Dependency, LocalDependency

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from pathlib import Path

    from .repository import Repository
    from .retrieval import RepositoryReader
    from .transfer import TransferOutcome

logger = logging.getLogger(__name__)


class DependencySet:
    """An insertion-ordered set of dependencies keyed by ``(group, artifact, classifier, type)``.

    Adding a dependency whose identity is already present is rejected, so the
    first version that was added is the one that stays. Local dependencies on
    files or directories are tracked separately for classpath assembly.
    """

    def __init__(self, dependencies: Iterable[Dependency] = ()) -> None:
        """Initialize the set with optional initial dependencies."""
        self._dependencies: dict[tuple[str, str, str, str], Dependency] = {}
        self._locals: dict[Path, LocalDependency] = {}
        self.add_all(dependencies)

    def add(self, dependency: Dependency) -> bool:
        """Add a dependency unless one with the same identity is present.

        Returns:
            True when the dependency was added

        """
        if dependency.identity in self._dependencies:
            return False
        self._dependencies[dependency.identity] = dependency
        return True

    def add_all(self, dependencies: Iterable[Dependency]) -> bool:
        """Add several dependencies, returning whether any of them was new."""
        added = False
        for dependency in dependencies:
            added = self.add(dependency) or added
        if isinstance(dependencies, DependencySet):
            for local in dependencies.local_dependencies():
                self.include_local(local)
        return added

    def get(self, dependency: Dependency) -> Dependency | None:
        """Return the member with the same identity, which may have another version."""
        return self._dependencies.get(dependency.identity)

    def remove(self, dependency: Dependency) -> bool:
        return self._dependencies.pop(dependency.identity, None) is not None

    def remove_all(self, dependencies: Iterable[Dependency]) -> bool:
        removed = False
        for dependency in dependencies:
            removed = self.remove(dependency) or removed
        return removed

    def remove_if(self, predicate: Callable[[Dependency], bool]) -> int:
        """Remove every dependency the predicate holds for, returning how many were removed."""
        doomed = [key for key, dependency in self._dependencies.items() if predicate(dependency)]
        for key in doomed:
            del self._dependencies[key]
        return len(doomed)

    def include_local(self, local: LocalDependency | Path | str) -> None:
        """Add a local file or directory dependency."""
        if not isinstance(local, LocalDependency):
            local = LocalDependency(local)
        self._locals.setdefault(local.path, local)

    def local_dependencies(self) -> list[LocalDependency]:
        """Return the local dependencies, in the order they were included."""
        return list(self._locals.values())

    def transfer_into_directory(
        self,
        repositories: Sequence[Repository],
        directory: Path | str,
        reader: RepositoryReader | None = None,
        progress: Callable[[str, TransferOutcome], None] | None = None,
    ) -> list[Path]:
        """Transfer the artifact of every dependency into a directory.

        Returns:
            The transferred files, in the order of this set

        """
        from .resolver import DependencyResolver  # noqa: PLC0415

        files = []
        with tqdm(
            desc="Transferring dependencies", total=len(self), leave=False, unit=" dependencies", disable=None
        ) as t:
            for dependency in self:
                resolver = DependencyResolver(repositories, dependency, reader=reader)
                files.append(resolver.transfer_into_directory(directory, progress=progress))
                t.update(1)
        return files

    def to_obj(self) -> list[dict[str, str | list[str]]]:
        """Convert the set to a list of dictionaries."""
        return [dependency.to_obj() for dependency in self]

    def __contains__(self, dependency: object) -> bool:
        return isinstance(dependency, Dependency) and dependency.identity in self._dependencies

    def __iter__(self) -> Iterator[Dependency]:
        yield from list(self._dependencies.values())

    def __len__(self) -> int:
        return len(self._dependencies)

    def __bool__(self) -> bool:
        return bool(self._dependencies) or bool(self._locals)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, DependencySet)
            and self._dependencies.keys() == other._dependencies.keys()
            and self._locals == other._locals
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "\n".join(map(str, self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}([{', '.join(map(repr, self))}])"

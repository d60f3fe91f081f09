"""Dependencies grouped by scope, and their scoped transitive resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .dependency_set import DependencySet
from .models import Scope
from .resolver import DependencyResolver
from .retrieval import RepositoryReader

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from .models import Dependency
    from .repository import Repository

logger = logging.getLogger(__name__)

COMPILE_AND_RUNTIME = (Scope.compile, Scope.runtime)


class DependencyScopes:
    """A mapping from scope to the dependencies declared in it.

    The caller populates it before resolution; the resolution methods only
    read it.
    """

    def __init__(self) -> None:
        self._scopes: dict[Scope, DependencySet] = {}

    def scope(self, scope: Scope) -> DependencySet:
        """Return the dependencies of a scope, creating an empty set on first access."""
        return self._scopes.setdefault(scope, DependencySet())

    def include(self, scope: Scope, dependency: Dependency) -> DependencyScopes:
        """Add a dependency to a scope."""
        self.scope(scope).add(dependency)
        return self

    def get(self, scope: Scope) -> DependencySet | None:
        return self._scopes.get(scope)

    def __contains__(self, scope: object) -> bool:
        return scope in self._scopes

    def __iter__(self) -> Iterator[Scope]:
        yield from self._scopes

    def __len__(self) -> int:
        return len(self._scopes)

    def items(self) -> Iterator[tuple[Scope, DependencySet]]:
        yield from self._scopes.items()

    def resolve_compile_dependencies(
        self, repositories: Sequence[Repository], reader: RepositoryReader | None = None
    ) -> DependencySet:
        """Resolve the transitive compile scope dependencies."""
        return self._resolve_scoped(repositories, (Scope.compile,), (Scope.compile,), None, reader)

    def resolve_runtime_dependencies(
        self, repositories: Sequence[Repository], reader: RepositoryReader | None = None
    ) -> DependencySet:
        """Resolve the transitive runtime dependencies that aren't already needed at compile time."""
        return self._resolve_scoped(
            repositories,
            COMPILE_AND_RUNTIME,
            COMPILE_AND_RUNTIME,
            self.resolve_compile_dependencies(repositories, reader),
            reader,
        )

    def resolve_standalone_dependencies(
        self, repositories: Sequence[Repository], reader: RepositoryReader | None = None
    ) -> DependencySet:
        """Resolve the transitive standalone dependencies."""
        return self._resolve_scoped(repositories, (Scope.standalone,), COMPILE_AND_RUNTIME, None, reader)

    def resolve_test_dependencies(
        self, repositories: Sequence[Repository], reader: RepositoryReader | None = None
    ) -> DependencySet:
        """Resolve the transitive test dependencies."""
        return self._resolve_scoped(repositories, (Scope.test,), COMPILE_AND_RUNTIME, None, reader)

    def _resolve_scoped(  # noqa: PLR0913
        self,
        repositories: Sequence[Repository],
        scopes: Sequence[Scope],
        transitive_scopes: Sequence[Scope],
        excluded: DependencySet | None,
        reader: RepositoryReader | None,
    ) -> DependencySet:
        if reader is None:
            reader = RepositoryReader()
        result = DependencySet()
        for scope in scopes:
            declared = self.get(scope)
            if declared is None:
                continue
            for dependency in declared:
                logger.debug("Resolving %s dependency %s", scope, dependency)
                resolver = DependencyResolver(repositories, dependency, reader=reader)
                result.add_all(resolver.get_all_dependencies(*transitive_scopes))
            for local in declared.local_dependencies():
                result.include_local(local)
        if excluded is not None:
            result.remove_all(excluded)
        return result

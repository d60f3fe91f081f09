from __future__ import annotations

from pathlib import Path

import pytest

from maven_depends.models import Dependency, Scope
from maven_depends.repository import MAVEN_CENTRAL
from maven_depends.resolver import DependencyResolver
from maven_depends.version import VersionNumber


@pytest.mark.integration
def test_maven_central_versions() -> None:
    resolver = DependencyResolver([MAVEN_CENTRAL], Dependency("org.slf4j", "slf4j-api"))
    assert resolver.exists()
    assert VersionNumber.parse("2.0.9") in resolver.list_versions()
    latest = resolver.resolve_version()
    assert latest >= VersionNumber.parse("2.0.9")
    assert not latest.is_snapshot()


@pytest.mark.integration
def test_maven_central_transitive() -> None:
    resolver = DependencyResolver([MAVEN_CENTRAL], Dependency("org.slf4j", "slf4j-simple", "2.0.9"))
    dependencies = resolver.get_all_dependencies(Scope.compile, Scope.runtime)
    assert [str(d) for d in dependencies] == ["org.slf4j:slf4j-simple:2.0.9", "org.slf4j:slf4j-api:2.0.9"]


@pytest.mark.integration
def test_maven_central_transfer(tmp_path: Path) -> None:
    resolver = DependencyResolver([MAVEN_CENTRAL], Dependency("org.slf4j", "slf4j-api", "2.0.9"))
    file = resolver.transfer_into_directory(tmp_path)
    assert file.name == "slf4j-api-2.0.9.jar"
    outcomes = []
    resolver.transfer_into_directory(tmp_path, lambda _, outcome: outcomes.append(str(outcome)))
    assert outcomes == ["exists"]

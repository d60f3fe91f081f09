"""Command-line interface for maven-depends."""

from __future__ import annotations

import json
import logging
import sys

from .maven_depends import version as maven_depends_version
from .config import OutputFormat, Settings
from .exceptions import DependencyError
from .logger import setup_logger
from .models import Dependency
from .resolver import DependencyResolver
from .retrieval import RepositoryReader

logger = logging.getLogger(__name__)


def main(args: list[str] | None = None) -> int:
    settings = Settings(_cli_parse_args=args if args is not None else True, _cli_prog_name="maven-depends")
    setup_logger(settings.log_level)

    if settings.version:
        sys.stdout.write(f"maven-depends {maven_depends_version()}\n")
        return 0

    dependency = Dependency.parse(settings.dependency)
    if dependency is None:
        logger.error(
            "Invalid dependency %r, expected GROUP_ID:ARTIFACT_ID[:VERSION[:CLASSIFIER]][@TYPE]", settings.dependency
        )
        return 2

    repositories = settings.resolved_repositories()
    logger.debug("Resolving %s with repositories %s", dependency, repositories)
    resolver = DependencyResolver(repositories, dependency, reader=RepositoryReader())

    try:
        if settings.list_versions:
            for version in resolver.list_versions():
                sys.stdout.write(f"{version}\n")
            return 0

        if not resolver.exists():
            logger.error("%s couldn't be found in %s", dependency, ", ".join(map(str, repositories)))
            return 1

        version = resolver.resolve_version()
        resolver = DependencyResolver(repositories, dependency.with_version(version), reader=resolver.reader)
        graph = resolver.get_dependency_graph(*settings.scopes)

        if settings.output_format == OutputFormat.json:
            sys.stdout.write(json.dumps(graph.to_obj(), indent=4) + "\n")
        else:
            sys.stdout.write(graph.to_tree() + "\n")

        if settings.download:
            settings.download_dir.mkdir(parents=True, exist_ok=True)
            for resolved in graph.dependencies():
                DependencyResolver(repositories, resolved, reader=resolver.reader).transfer_into_directory(
                    settings.download_dir
                )
            logger.info("Artifacts saved to %s", settings.download_dir.absolute())
    except DependencyError as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1

    return 0

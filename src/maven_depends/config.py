"""Configuration settings for maven-depends."""

from __future__ import annotations

from enum import Enum
from pathlib import Path  # noqa: TC003

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    CliImplicitFlag,
    SettingsConfigDict,
)

from .maven_depends import DEFAULT_DOWNLOAD_DIR
from .models import Scope
from .repository import Repository, resolve_repository


class OutputFormat(str, Enum):
    """Output formats for maven-depends."""

    tree = "tree"
    json = "json"


class Credentials(BaseModel):
    """Username and password used for HTTP Basic authentication against a repository."""

    username: str
    password: str = Field(repr=False)


class Settings(BaseSettings):
    """Settings for maven-depends.

    Every setting can also be given as an environment variable prefixed with
    ``MAVEN_DEPENDS_``, for example ``MAVEN_DEPENDS_REPOSITORIES='["central"]'``.
    """

    dependency: str = Field(
        default="",
        description="""Dependency to resolve, in the form
            GROUP_ID:ARTIFACT_ID[:VERSION[:CLASSIFIER]][@TYPE]. Without a
            version the latest stable version is used.
            For example: `org.slf4j:slf4j-api:2.0.9` or `com.h2database:h2`.""",
    )
    repositories: list[str] = Field(
        default=["central"],
        description="""Repositories to search, in priority order. Each entry is
            a configured repository name, a well-known name (`central`,
            `sonatype_snapshots`, `local`, ...), a directory or a URL.""",
    )
    named_repositories: dict[str, str] = Field(
        default={},
        description="""Repository names mapped to their locations.""",
    )
    repository_credentials: dict[str, Credentials] = Field(
        default={},
        description="""Credentials keyed by repository name or location.""",
    )
    scopes: list[Scope] = Field(
        default=[Scope.compile, Scope.runtime],
        description="""Scopes whose transitive dependencies are followed.""",
    )
    download: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Transfer the artifacts of all resolved dependencies into `--download_dir`.""",
    )
    download_dir: Path = Field(
        default=DEFAULT_DOWNLOAD_DIR,
        description="""Directory the artifacts are transferred into.""",
    )
    list_versions: CliImplicitFlag[bool] = Field(
        default=False,
        description="""List the available versions of the dependency instead of resolving it.""",
    )
    log_level: str = Field(default="info", description="Log level")
    output_format: OutputFormat = Field(
        default=OutputFormat.tree,
        description="""Output format of the resolved dependencies.""",
    )
    version: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Show the version of maven-depends and exit.""",
    )

    model_config = SettingsConfigDict(
        env_prefix="MAVEN_DEPENDS_",
        nested_model_default_partial_update=True,
    )

    def resolved_repositories(self) -> list[Repository]:
        """Turn the configured repository entries into repositories, attaching credentials."""
        return [
            resolve_repository(entry, self.named_repositories, self.repository_credentials)
            for entry in self.repositories
        ]

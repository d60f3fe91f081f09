"""Maven repositories and the locations of the artifacts inside them."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .config import Credentials
    from .models import Dependency

METADATA_NAME = "maven-metadata.xml"
LOCAL_METADATA_NAME = "maven-metadata-local.xml"


class Repository:
    """A Maven-compatible repository, either a local directory or a remote HTTP location."""

    def __init__(self, location: str, username: str | None = None, password: str | None = None) -> None:
        """Initialize the repository.

        Args:
            location: Directory path, ``file:`` URL or HTTP(S) URL of the repository
            username: Optional username for HTTP Basic authentication
            password: Optional password for HTTP Basic authentication

        """
        self.location: str = location
        self.username: str | None = username
        self.password: str | None = password

    @staticmethod
    def from_path(path: Path | str) -> Repository:
        """Create a local repository from a filesystem path."""
        return Repository(str(Path(path).absolute()))

    def with_credentials(self, username: str | None, password: str | None) -> Repository:
        """Return a copy of this repository that authenticates with these credentials."""
        return Repository(self.location, username, password)

    def is_local(self) -> bool:
        """Check whether this repository is read directly from the filesystem."""
        return self.location.startswith(("/", "file:"))

    def has_credentials(self) -> bool:
        """Check whether both a username and a password are set."""
        return self.username is not None and self.password is not None

    @property
    def base_location(self) -> str:
        """The repository location with any ``file:`` scheme removed and a trailing separator."""
        location = self.location
        if location.startswith("file://"):
            location = location[len("file://") :]
        elif location.startswith("file:"):
            location = location[len("file:") :]
        if not location.endswith("/"):
            location += "/"
        return location

    def get_artifact_location(self, dependency: Dependency) -> str:
        """Return ``<base>/<group path>/<artifactId>/`` for this dependency."""
        group_path = dependency.group_id.replace(".", "/")
        return f"{self.base_location}{group_path}/{dependency.artifact_id}/"

    def get_metadata_name(self) -> str:
        """Return the name of the version index document in this repository."""
        return LOCAL_METADATA_NAME if self.is_local() else METADATA_NAME

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Repository) and (self.location, self.username, self.password) == (
            other.location,
            other.username,
            other.password,
        )

    def __hash__(self) -> int:
        return hash((self.location, self.username))

    def __repr__(self) -> str:
        """Get the representation of the repository, never showing the password."""
        if self.username is None:
            return f"{self.__class__.__name__}({self.location!r})"
        return f"{self.__class__.__name__}({self.location!r}, username={self.username!r})"

    def __str__(self) -> str:
        return self.location


class RepositoryArtifact:
    """A fully qualified location inside a repository."""

    def __init__(self, repository: Repository, location: str) -> None:
        self.repository: Repository = repository
        self.location: str = location

    def append_path(self, path: str) -> RepositoryArtifact:
        """Return a new artifact whose location has ``path`` appended."""
        return RepositoryArtifact(self.repository, self.location + path)

    @property
    def filename(self) -> str:
        """The last path segment of the location."""
        return self.location.rsplit("/", 1)[-1]

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, RepositoryArtifact)
            and self.repository == other.repository
            and self.location == other.location
        )

    def __hash__(self) -> int:
        return hash(self.location)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.repository!r}, {self.location!r})"

    def __str__(self) -> str:
        return self.location


MAVEN_CENTRAL = Repository("https://repo1.maven.org/maven2/")
SONATYPE_RELEASES = Repository("https://s01.oss.sonatype.org/service/local/staging/deploy/maven2/")
SONATYPE_SNAPSHOTS = Repository("https://s01.oss.sonatype.org/content/repositories/snapshots/")
APACHE = Repository("https://repo.maven.apache.org/maven2/")
RIFE2_RELEASES = Repository("https://repo.rife2.com/releases/")
RIFE2_SNAPSHOTS = Repository("https://repo.rife2.com/snapshots/")
MAVEN_LOCAL = Repository(str(Path.home() / ".m2" / "repository"))

KNOWN_REPOSITORIES: dict[str, Repository] = {
    "central": MAVEN_CENTRAL,
    "maven_central": MAVEN_CENTRAL,
    "sonatype_releases": SONATYPE_RELEASES,
    "sonatype_snapshots": SONATYPE_SNAPSHOTS,
    "apache": APACHE,
    "rife2_releases": RIFE2_RELEASES,
    "rife2_snapshots": RIFE2_SNAPSHOTS,
    "local": MAVEN_LOCAL,
    "maven_local": MAVEN_LOCAL,
}


def resolve_repository(
    name_or_location: str,
    named: Mapping[str, str] | None = None,
    credentials: Mapping[str, Credentials] | None = None,
) -> Repository:
    """Look up a repository by configured name, well-known name, or treat the argument as a location.

    Args:
        name_or_location: Repository name like ``central`` or a location
        named: Configured repository names mapped to their locations
        credentials: Credentials keyed by repository name or location

    Returns:
        The matching repository, with credentials attached when configured

    """
    key = name_or_location.lower()
    if named and name_or_location in named:
        repository = Repository(named[name_or_location])
    elif key in KNOWN_REPOSITORIES:
        repository = KNOWN_REPOSITORIES[key]
    else:
        repository = Repository(name_or_location)
    if credentials:
        creds = credentials.get(name_or_location) or credentials.get(repository.location)
        if creds is not None:
            repository = repository.with_credentials(creds.username, creds.password)
    return repository

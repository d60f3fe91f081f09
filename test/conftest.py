from __future__ import annotations

from pathlib import Path

import pytest

from maven_depends.repository import Repository


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--runintegration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--runintegration"):
        # --runintegration given in cli: do not skip integration tests
        return
    skip_integration = pytest.mark.skip(reason="need --runintegration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def dep(  # noqa: PLR0913
    group_id: str,
    artifact_id: str,
    version: str | None = None,
    scope: str | None = None,
    exclusions: tuple[tuple[str, str], ...] = (),
    optional: bool = False,
    type: str | None = None,  # noqa: A002
    classifier: str | None = None,
) -> str:
    """Render a ``<dependency>`` element."""
    xml = f"<dependency><groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId>"
    if version is not None:
        xml += f"<version>{version}</version>"
    if classifier is not None:
        xml += f"<classifier>{classifier}</classifier>"
    if type is not None:
        xml += f"<type>{type}</type>"
    if scope is not None:
        xml += f"<scope>{scope}</scope>"
    if optional:
        xml += "<optional>true</optional>"
    if exclusions:
        xml += "<exclusions>"
        for group, artifact in exclusions:
            xml += f"<exclusion><groupId>{group}</groupId><artifactId>{artifact}</artifactId></exclusion>"
        xml += "</exclusions>"
    return xml + "</dependency>"


def pom_document(  # noqa: PLR0913
    group_id: str | None,
    artifact_id: str,
    version: str | None,
    dependencies: tuple[str, ...] = (),
    managed: tuple[str, ...] = (),
    properties: dict[str, str] | None = None,
    parent: tuple[str, str, str] | None = None,
    packaging: str | None = None,
) -> str:
    """Render a descriptor document."""
    xml = '<?xml version="1.0" encoding="UTF-8"?>\n'
    xml += '<project xmlns="http://maven.apache.org/POM/4.0.0"><modelVersion>4.0.0</modelVersion>'
    if parent is not None:
        xml += (
            f"<parent><groupId>{parent[0]}</groupId><artifactId>{parent[1]}</artifactId>"
            f"<version>{parent[2]}</version></parent>"
        )
    if group_id is not None:
        xml += f"<groupId>{group_id}</groupId>"
    xml += f"<artifactId>{artifact_id}</artifactId>"
    if version is not None:
        xml += f"<version>{version}</version>"
    if packaging is not None:
        xml += f"<packaging>{packaging}</packaging>"
    if properties:
        xml += "<properties>" + "".join(f"<{k}>{v}</{k}>" for k, v in properties.items()) + "</properties>"
    if managed:
        xml += "<dependencyManagement><dependencies>" + "".join(managed) + "</dependencies></dependencyManagement>"
    if dependencies:
        xml += "<dependencies>" + "".join(dependencies) + "</dependencies>"
    return xml + "</project>"


def metadata_document(
    group_id: str,
    artifact_id: str,
    versions: tuple[str, ...],
    latest: str | None = None,
    release: str | None = None,
) -> str:
    """Render a version index document."""
    xml = '<?xml version="1.0" encoding="UTF-8"?>\n'
    xml += f"<metadata><groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId><versioning>"
    if latest is not None:
        xml += f"<latest>{latest}</latest>"
    if release is not None:
        xml += f"<release>{release}</release>"
    xml += "<versions>" + "".join(f"<version>{v}</version>" for v in versions) + "</versions>"
    return xml + "<lastUpdated>20230516120000</lastUpdated></versioning></metadata>"


def snapshot_metadata_document(
    group_id: str, artifact_id: str, version: str, timestamp: str | None, build_number: str | None
) -> str:
    """Render the version index of a snapshot version."""
    xml = '<?xml version="1.0" encoding="UTF-8"?>\n'
    xml += f"<metadata><groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId>"
    xml += f"<version>{version}</version><versioning><snapshot>"
    if timestamp is not None:
        xml += f"<timestamp>{timestamp}</timestamp>"
    if build_number is not None:
        xml += f"<buildNumber>{build_number}</buildNumber>"
    if timestamp is None and build_number is None:
        xml += "<localCopy>true</localCopy>"
    return xml + "</snapshot><lastUpdated>20230516120000</lastUpdated></versioning></metadata>"


class LocalRepositoryBuilder:
    """Lays out a Maven repository on disk."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.repository = Repository.from_path(root)

    def artifact_dir(self, group_id: str, artifact_id: str) -> Path:
        path = self.root.joinpath(*group_id.split("."), artifact_id)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def version_dir(self, group_id: str, artifact_id: str, version: str) -> Path:
        path = self.artifact_dir(group_id, artifact_id) / version
        path.mkdir(parents=True, exist_ok=True)
        return path

    def add_metadata(
        self,
        group_id: str,
        artifact_id: str,
        versions: tuple[str, ...],
        latest: str | None = None,
        release: str | None = None,
    ) -> Path:
        path = self.artifact_dir(group_id, artifact_id) / "maven-metadata-local.xml"
        path.write_text(metadata_document(group_id, artifact_id, versions, latest, release))
        return path

    def add_snapshot_metadata(
        self, group_id: str, artifact_id: str, version: str, timestamp: str | None, build_number: str | None
    ) -> Path:
        path = self.version_dir(group_id, artifact_id, version) / "maven-metadata-local.xml"
        path.write_text(snapshot_metadata_document(group_id, artifact_id, version, timestamp, build_number))
        return path

    def add_pom(  # noqa: PLR0913
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        dependencies: tuple[str, ...] = (),
        managed: tuple[str, ...] = (),
        properties: dict[str, str] | None = None,
        parent: tuple[str, str, str] | None = None,
        file_version: str | None = None,
        packaging: str | None = None,
    ) -> Path:
        path = self.version_dir(group_id, artifact_id, version) / f"{artifact_id}-{file_version or version}.pom"
        path.write_text(
            pom_document(group_id, artifact_id, version, dependencies, managed, properties, parent, packaging)
        )
        return path

    def add_jar(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        content: bytes = b"jar-content",
        classifier: str = "",
        file_version: str | None = None,
    ) -> Path:
        name = f"{artifact_id}-{file_version or version}"
        if classifier:
            name += f"-{classifier}"
        path = self.version_dir(group_id, artifact_id, version) / f"{name}.jar"
        path.write_bytes(content)
        return path

    def add_artifact(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        dependencies: tuple[str, ...] = (),
    ) -> None:
        """Add a metadata file listing the version, its descriptor and its jar."""
        self.add_metadata(group_id, artifact_id, (version,), latest=version, release=version)
        self.add_pom(group_id, artifact_id, version, dependencies)
        self.add_jar(group_id, artifact_id, version)


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"", fail_after: int | None = None) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = {"Content-Length": str(len(content))}
        self.fail_after = fail_after
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        from requests import ConnectionError as RequestsConnectionError  # noqa: PLC0415

        for offset in range(0, len(self.content), chunk_size):
            if self.fail_after is not None and offset >= self.fail_after:
                msg = "connection reset"
                raise RequestsConnectionError(msg)
            yield self.content[offset : offset + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for a requests session, serving canned responses by URL."""

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.responses: dict[str, FakeResponse | Exception] = {}
        self.requests: list[tuple[str, tuple[str, str] | None]] = []

    def serve(self, url: str, content: bytes | str, status_code: int = 200, fail_after: int | None = None) -> None:
        if isinstance(content, str):
            content = content.encode()
        self.responses[url] = FakeResponse(status_code, content, fail_after)

    def fail(self, url: str, error: Exception) -> None:
        self.responses[url] = error

    def get(self, url: str, auth: tuple[str, str] | None = None, stream: bool = False):  # noqa: ARG002
        self.requests.append((url, auth))
        response = self.responses.get(url)
        if response is None:
            return FakeResponse(404)
        if isinstance(response, Exception):
            raise response
        return response

    def urls(self) -> list[str]:
        return [url for url, _ in self.requests]


@pytest.fixture
def local_repo(tmp_path: Path) -> LocalRepositoryBuilder:
    return LocalRepositoryBuilder(tmp_path / "repository")


@pytest.fixture
def other_repo(tmp_path: Path) -> LocalRepositoryBuilder:
    return LocalRepositoryBuilder(tmp_path / "other-repository")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    path = tmp_path / "downloads"
    path.mkdir()
    return path

"""Parsing of ``maven-metadata.xml`` version indexes."""

from __future__ import annotations

import re

from .version import VersionNumber
from .xml_events import XmlEventParser

MILESTONE = re.compile(r"^m\d*$")
BETA = re.compile(r"^b\d*$")
ALPHA = re.compile(r"^a\d*$")


def is_pre_release(version: VersionNumber) -> bool:
    """Check whether a version's qualifier marks a release candidate, milestone, beta or alpha."""
    if version.qualifier is None:
        return False
    qualifier = version.qualifier.lower()
    return (
        qualifier.startswith(("rc", "cr"))
        or "milestone" in qualifier
        or MILESTONE.match(qualifier) is not None
        or "beta" in qualifier
        or BETA.match(qualifier) is not None
        or "alpha" in qualifier
        or ALPHA.match(qualifier) is not None
    )


class MavenMetadata(XmlEventParser):
    """The latest, release and snapshot pointers plus the version list of one artifact.

    The ``latest`` pointer of the document isn't trusted: once the document
    has been read it is replaced by the highest version that isn't a
    pre-release, when there is one.
    """

    def __init__(self) -> None:
        super().__init__()
        self.latest: VersionNumber = VersionNumber.UNKNOWN
        self.release: VersionNumber = VersionNumber.UNKNOWN
        self.snapshot: VersionNumber = VersionNumber.UNKNOWN
        self.versions: list[VersionNumber] = []
        self._last_timestamp: str | None = None
        self._last_build_number: str | None = None

    @classmethod
    def parse(cls, document: str) -> MavenMetadata:
        """Parse a document, check :attr:`errors` on the result to see if it succeeded."""
        metadata = cls()
        metadata.process(document)
        return metadata

    def end_element(self, name: str, text: str) -> None:
        if name == "latest":
            self.latest = VersionNumber.parse(text)
        elif name == "release":
            self.release = VersionNumber.parse(text)
        elif name == "version":
            version = VersionNumber.parse(text)
            if version not in self.versions:
                self.versions.append(version)
        elif name == "timestamp":
            self._last_timestamp = text
        elif name == "buildNumber":
            self._last_build_number = text
        elif name == "snapshot":
            self._end_snapshot()

    def _end_snapshot(self) -> None:
        if not self.versions:
            self.errors.append("snapshot element found before any version")
        elif self._last_timestamp and self._last_build_number:
            version = self.versions[0]
            self.snapshot = VersionNumber(
                version.major,
                version.minor,
                version.revision,
                f"{self._last_timestamp}-{self._last_build_number}",
            )
        else:
            # local repositories only mark the snapshot as a local copy
            self.snapshot = self.versions[0]
        self._last_timestamp = None
        self._last_build_number = None

    def end_document(self) -> None:
        stable = sorted(
            v
            for v in self.versions
            if v != VersionNumber.UNKNOWN and not v.is_snapshot() and not is_pre_release(v)
        )
        if stable:
            self.latest = stable[-1]

    def to_obj(self) -> dict[str, str | list[str]]:
        """Convert the metadata to a dictionary representation."""
        return {
            "latest": str(self.latest),
            "release": str(self.release),
            "snapshot": str(self.snapshot),
            "versions": [str(v) for v in self.versions],
        }

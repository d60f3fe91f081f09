"""Transferring artifacts from repositories into a local directory."""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import ArtifactNotFoundError, ArtifactRetrievalError, DependencyError, DependencyTransferError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .models import Dependency
    from .repository import RepositoryArtifact
    from .retrieval import RepositoryReader

logger = logging.getLogger(__name__)

HASH_ALGORITHMS = ((".sha256", "sha256"), (".md5", "md5"))
CHUNK_SIZE = 64 * 1024


class TransferOutcome(str, Enum):
    """What happened to one candidate location of a transfer."""

    done = "done"
    exists = "exists"
    not_found = "not found"

    def __str__(self) -> str:
        return self.value


def file_digest(path: Path, algorithm: str) -> str:
    """Compute the lower-case hex digest of a file."""
    digest = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def check_directory(directory: Path) -> None:
    """Make sure the directory can receive artifacts."""
    if not directory.exists():
        msg = f"directory '{directory}' doesn't exist"
        raise ValueError(msg)
    if not directory.is_dir():
        msg = f"directory '{directory}' is not a directory"
        raise ValueError(msg)
    if not os.access(directory, os.W_OK):
        msg = f"directory '{directory}' can't be written to"
        raise ValueError(msg)


class ArtifactTransfer:
    """Copies or downloads the artifact of one dependency, trying its locations in priority order."""

    def __init__(
        self,
        dependency: Dependency,
        artifacts: Sequence[RepositoryArtifact],
        reader: RepositoryReader,
    ) -> None:
        """Initialize the transfer.

        Args:
            dependency: The dependency whose artifact is transferred
            artifacts: Candidate locations, one per repository, in priority order
            reader: Reader used for remote locations and hash side files

        """
        self.dependency: Dependency = dependency
        self.artifacts: list[RepositoryArtifact] = list(artifacts)
        self.reader: RepositoryReader = reader

    def has_matching_hash(self, artifact: RepositoryArtifact, file: Path) -> bool:
        """Check an existing file against the SHA-256 side file, falling back to the MD5 one.

        A side file that is missing or unreadable doesn't vouch for the file.
        """
        for extension, algorithm in HASH_ALGORITHMS:
            try:
                expected = self.reader.read_string(artifact.append_path(extension), self.dependency)
            except DependencyError as e:
                logger.debug("No usable %s for %s: %s", extension, artifact.location, e)
                continue
            tokens = expected.split()
            if not tokens:
                continue
            try:
                actual = file_digest(file, algorithm)
            except OSError as e:
                logger.debug("Unable to hash %s: %s", file, e)
                return False
            if tokens[0].lower() == actual:
                return True
        return False

    def _report(
        self, location: str, outcome: TransferOutcome, progress: Callable[[str, TransferOutcome], None] | None
    ) -> None:
        logger.info("%s ... %s", location, outcome)
        if progress is not None:
            progress(location, outcome)

    @staticmethod
    def _is_source(artifact: RepositoryArtifact, destination: Path) -> bool:
        """Check whether the destination is the local repository file itself."""
        if not artifact.repository.is_local():
            return False
        source = Path(artifact.location)
        return source.is_file() and source.samefile(destination)

    def _transfer(self, artifact: RepositoryArtifact, destination: Path) -> bool:
        if artifact.repository.is_local():
            source = Path(artifact.location)
            if not source.is_file():
                return False
            try:
                shutil.copyfile(source, destination)
            except shutil.SameFileError:
                raise
            except BaseException:
                destination.unlink(missing_ok=True)
                raise
            return True
        try:
            self.reader.download(artifact, destination, self.dependency)
        except ArtifactNotFoundError:
            return False
        return True

    def into_directory(
        self,
        directory: Path | str,
        progress: Callable[[str, TransferOutcome], None] | None = None,
    ) -> Path:
        """Transfer the artifact into a directory, stopping at the first location that works.

        Args:
            directory: Existing, writable destination directory
            progress: Called with each attempted location and its outcome

        Returns:
            The transferred file

        Raises:
            ValueError: the directory can't receive the artifact
            DependencyTransferError: copying or downloading failed
            ArtifactNotFoundError: no location had the artifact

        """
        directory = Path(directory)
        check_directory(directory)
        for artifact in self.artifacts:
            destination = directory / artifact.filename
            if destination.is_file() and (
                self._is_source(artifact, destination) or self.has_matching_hash(artifact, destination)
            ):
                self._report(artifact.location, TransferOutcome.exists, progress)
                return destination
            try:
                transferred = self._transfer(artifact, destination)
            except (ArtifactRetrievalError, OSError) as e:
                raise DependencyTransferError(self.dependency, artifact.location, destination) from e
            if transferred:
                self._report(artifact.location, TransferOutcome.done, progress)
                return destination
            self._report(artifact.location, TransferOutcome.not_found, progress)
        raise ArtifactNotFoundError(self.dependency, [a.location for a in self.artifacts])

"""Reading documents and artifacts from local and remote repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from requests import RequestException, Response, Session
from tqdm import tqdm

from .exceptions import ArtifactNotFoundError, ArtifactRetrievalError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import Dependency
    from .repository import RepositoryArtifact

logger = logging.getLogger(__name__)

NOT_FOUND_STATUS_CODES = frozenset({404, 410})
CHUNK_SIZE = 64 * 1024


def _content_length(response: Response) -> int | None:
    """Return the announced body size, or None when it is missing or malformed."""
    try:
        return int(response.headers.get("Content-Length", 0)) or None
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed Content-Length %r", response.headers.get("Content-Length"))
        return None


class RepositoryReader:
    """Reads repository locations, telling absent documents apart from real failures.

    Local repositories are read straight from the filesystem. Remote ones go
    through a :class:`requests.Session` that asks every intermediary not to
    serve cached responses, and that sends HTTP Basic credentials only when the
    repository has both a username and a password.
    """

    def __init__(self, session: Session | None = None) -> None:
        """Initialize the reader.

        Args:
            session: Session used for remote repositories, a new one by default

        """
        if session is None:
            session = Session()
        session.headers["Cache-Control"] = "no-cache"
        session.headers["Pragma"] = "no-cache"
        self.session: Session = session

    def _get(self, artifact: RepositoryArtifact, dependency: Dependency | None, *, stream: bool = False) -> Response:
        repository = artifact.repository
        auth = (repository.username, repository.password) if repository.has_credentials() else None
        logger.debug("GET %s", artifact.location)
        try:
            response = self.session.get(artifact.location, auth=auth, stream=stream)
        except RequestException as e:
            raise ArtifactRetrievalError(dependency, artifact.location, str(e)) from e
        if response.status_code in NOT_FOUND_STATUS_CODES:
            response.close()
            raise ArtifactNotFoundError(dependency, artifact.location)
        if response.status_code >= 400:  # noqa: PLR2004
            response.close()
            raise ArtifactRetrievalError(dependency, artifact.location, f"HTTP status {response.status_code}")
        return response

    def read_string(self, artifact: RepositoryArtifact, dependency: Dependency | None = None) -> str:
        """Read the text at an artifact location.

        Raises:
            ArtifactNotFoundError: the location doesn't exist
            ArtifactRetrievalError: the location couldn't be read for another reason

        """
        if artifact.repository.is_local():
            try:
                return Path(artifact.location).read_text(encoding="utf-8")
            except FileNotFoundError as e:
                raise ArtifactNotFoundError(dependency, artifact.location) from e
            except (OSError, UnicodeDecodeError) as e:
                raise ArtifactRetrievalError(dependency, artifact.location, str(e)) from e

        response = self._get(artifact, dependency)
        try:
            return response.content.decode("utf-8", errors="replace")
        except RequestException as e:
            raise ArtifactRetrievalError(dependency, artifact.location, str(e)) from e
        finally:
            response.close()

    def read_first(
        self, artifacts: Iterable[RepositoryArtifact], dependency: Dependency | None = None
    ) -> tuple[RepositoryArtifact, str]:
        """Read the first of the locations that exists, trying them in order.

        A location that isn't found falls through to the next one, any other
        failure is raised right away.

        Returns:
            The location that was read and its content

        Raises:
            ArtifactNotFoundError: none of the locations exist, naming all of them

        """
        tried: list[str] = []
        for artifact in artifacts:
            try:
                return artifact, self.read_string(artifact, dependency)
            except ArtifactNotFoundError:
                logger.debug("Not found: %s", artifact.location)
                tried.append(artifact.location)
        raise ArtifactNotFoundError(dependency, tried)

    def download(self, artifact: RepositoryArtifact, destination: Path, dependency: Dependency | None = None) -> None:
        """Stream a remote artifact into a file.

        A partially written file is removed before any error propagates.

        Raises:
            ArtifactNotFoundError: the remote location doesn't exist; no file is written
            ArtifactRetrievalError: the remote location couldn't be read
            OSError: the destination couldn't be written

        """
        response = self._get(artifact, dependency, stream=True)
        total = _content_length(response)
        try:
            with (
                destination.open("wb") as out,
                tqdm(
                    desc=artifact.filename,
                    total=total,
                    unit="B",
                    unit_scale=True,
                    leave=False,
                    disable=None,
                ) as t,
            ):
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    out.write(chunk)
                    t.update(len(chunk))
        except RequestException as e:
            destination.unlink(missing_ok=True)
            raise ArtifactRetrievalError(dependency, artifact.location, str(e)) from e
        except BaseException:
            destination.unlink(missing_ok=True)
            raise
        finally:
            response.close()

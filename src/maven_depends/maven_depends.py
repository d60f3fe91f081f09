"""Version and directory utilities for maven-depends."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as meta_version
from pathlib import Path

from platformdirs import PlatformDirs


def version() -> str:
    """Get the installed version of maven-depends."""
    try:
        return meta_version("maven-depends")
    except PackageNotFoundError:
        from . import __version__  # noqa: PLC0415

        return __version__


APP_DIRS = PlatformDirs("maven-depends", "maven-depends")

DEFAULT_DOWNLOAD_DIR = Path(APP_DIRS.user_cache_dir) / "artifacts"

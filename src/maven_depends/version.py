"""Maven style version numbers."""

from __future__ import annotations

import functools
import re

VERSION_PATTERN = re.compile(
    r"^(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+)(?:\.(?P<revision>\d+))?)?"
    r"(?:(?P<separator>[.\-])(?P<qualifier>.*[^.\-]))?$"
)

SNAPSHOT = "SNAPSHOT"


@functools.total_ordering
class VersionNumber:
    """An immutable, totally ordered version number.

    A version has a numeric major part, optional minor and revision parts, and
    an optional textual qualifier. Missing parts sort before present ones, and
    a version without a qualifier sorts after any qualified version with the
    same numeric parts.
    """

    UNKNOWN: VersionNumber

    __slots__ = ("_major", "_minor", "_qualifier", "_revision", "_separator")

    def __init__(
        self,
        major: int | None,
        minor: int | None = None,
        revision: int | None = None,
        qualifier: str | None = None,
        separator: str = "-",
    ) -> None:
        """Create a version from its parts.

        Args:
            major: Major version, ``None`` only for the unknown version
            minor: Optional minor version
            revision: Optional revision
            qualifier: Optional qualifier, an empty string means no qualifier
            separator: Separator rendered between the numbers and the qualifier

        """
        object.__setattr__(self, "_major", major)
        object.__setattr__(self, "_minor", minor)
        object.__setattr__(self, "_revision", revision)
        object.__setattr__(self, "_qualifier", qualifier or None)
        object.__setattr__(self, "_separator", separator)

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{self.__class__.__name__} is immutable"
        raise AttributeError(msg)

    @classmethod
    def parse(cls, text: str | None) -> VersionNumber:
        """Parse a version string.

        Accepts ``major[.minor[.revision]][-qualifier]`` as well as a qualifier
        separated by a dot, like ``1.0.0.Final``. Text that doesn't match
        yields :attr:`UNKNOWN` rather than raising.
        """
        if not text:
            return cls.UNKNOWN
        match = VERSION_PATTERN.match(text.strip())
        if match is None:
            return cls.UNKNOWN
        minor = match.group("minor")
        revision = match.group("revision")
        return cls(
            int(match.group("major")),
            None if minor is None else int(minor),
            None if revision is None else int(revision),
            match.group("qualifier"),
            match.group("separator") or "-",
        )

    @property
    def major(self) -> int | None:
        return self._major

    @property
    def minor(self) -> int | None:
        return self._minor

    @property
    def revision(self) -> int | None:
        return self._revision

    @property
    def qualifier(self) -> str | None:
        return self._qualifier

    @property
    def separator(self) -> str:
        return self._separator

    def base_version(self) -> VersionNumber:
        """Return this version without its qualifier."""
        if self is VersionNumber.UNKNOWN:
            return self
        return VersionNumber(self._major, self._minor, self._revision)

    def with_qualifier(self, qualifier: str | None) -> VersionNumber:
        """Return a copy of this version with another qualifier."""
        return VersionNumber(self._major, self._minor, self._revision, qualifier, self._separator)

    def is_snapshot(self) -> bool:
        """Check whether the qualifier ends with the ``SNAPSHOT`` marker."""
        return self._qualifier is not None and self._qualifier.endswith(SNAPSHOT)

    def _sort_key(self) -> tuple:
        if self._major is None:
            return ((-1,),)
        qualifier_key: tuple = (1,) if self._qualifier is None else (0, self._qualifier.lower(), self._qualifier)
        return (
            (0, self._major),
            -1 if self._minor is None else self._minor,
            -1 if self._revision is None else self._revision,
            qualifier_key,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return (self._major, self._minor, self._revision, self._qualifier) == (
            other._major,
            other._minor,
            other._revision,
            other._qualifier,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash((self._major, self._minor, self._revision, self._qualifier))

    def __str__(self) -> str:
        if self._major is None:
            return ""
        result = str(self._major)
        if self._minor is not None:
            result += f".{self._minor}"
            if self._revision is not None:
                result += f".{self._revision}"
        if self._qualifier:
            result += f"{self._separator}{self._qualifier}"
        return result

    def __repr__(self) -> str:
        if self._major is None:
            return "VersionNumber.UNKNOWN"
        return f"{self.__class__.__name__}.parse({str(self)!r})"


VersionNumber.UNKNOWN = VersionNumber(None)

"""Event driven parsing of small XML documents."""

from __future__ import annotations

import logging
from xml.etree.ElementTree import ParseError, XMLPullParser

logger = logging.getLogger(__name__)


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts in front of qualified tags."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


class XmlEventParser:
    """Drive element start/end callbacks over a document.

    Subclasses keep their own state and react to :meth:`start_element`,
    :meth:`end_element` and :meth:`end_document`. Structural problems are
    appended to :attr:`errors` rather than raised so that a document reports
    everything that is wrong with it at once.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.path: list[str] = []

    def process(self, document: str) -> bool:
        """Parse a complete document.

        Returns:
            True when the document was parsed without any error

        """
        parser = XMLPullParser(events=("start", "end"))
        try:
            parser.feed(document)
            self._drain(parser)
            parser.close()
            self._drain(parser)
        except ParseError as e:
            self.errors.append(f"malformed XML: {e}")
            return False
        self.end_document()
        return not self.errors

    def _drain(self, parser: XMLPullParser) -> None:
        for event, element in parser.read_events():
            name = local_name(element.tag)
            if event == "start":
                self.path.append(name)
                self.start_element(name)
            else:
                self.end_element(name, (element.text or "").strip())
                self.path.pop()
                element.clear()

    def parent_is(self, *names: str) -> bool:
        """Check whether the element being closed sits directly below this path of element names."""
        if len(self.path) < len(names) + 1:
            return False
        return tuple(self.path[-len(names) - 1 : -1]) == names

    def start_element(self, name: str) -> None:
        """Handle the start of an element."""

    def end_element(self, name: str, text: str) -> None:
        """Handle the end of an element along with its character data."""

    def end_document(self) -> None:
        """Handle the end of the document."""

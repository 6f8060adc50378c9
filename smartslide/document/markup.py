"""
Slide markup traversal for SmartSlide.

Slide text in PresentationML sits in DrawingML text bodies:
``<a:p>`` (paragraph) -> ``<a:r>`` (run) -> ``<a:t>`` (text). Elements are
classified into a small set of node kinds so the extraction rules can be
written against kinds instead of raw tag strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from lxml import etree

DRAWINGML_NAMESPACES = frozenset(
    {
        "http://schemas.openxmlformats.org/drawingml/2006/main",
        # ISO 29500 strict packages
        "http://purl.oclc.org/ooxml/drawingml/main",
    }
)


# lxml refuses str input that still carries an encoding declaration
_XML_DECLARATION = re.compile(r"\A\ufeff?(?:\s*<\?xml[^>]*\?>)?")


class NodeKind(Enum):
    PARAGRAPH = "paragraph"
    RUN = "run"
    TEXT = "text"
    OTHER = "other"


_KIND_BY_LOCAL_NAME = {
    "p": NodeKind.PARAGRAPH,
    "r": NodeKind.RUN,
    "fld": NodeKind.RUN,
    "t": NodeKind.TEXT,
}


class TextSource(Enum):
    """Which extraction path produced a slide's text."""

    PARAGRAPHS = "paragraphs"
    FLAT = "flat"
    NONE = "none"


class MarkupParseError(ValueError):
    """Raised when slide markup is not well-formed XML."""


def classify(element: etree._Element) -> NodeKind:
    if not isinstance(element.tag, str):
        return NodeKind.OTHER
    qname = etree.QName(element)
    if qname.namespace not in DRAWINGML_NAMESPACES:
        return NodeKind.OTHER
    return _KIND_BY_LOCAL_NAME.get(qname.localname, NodeKind.OTHER)


@dataclass(frozen=True)
class MarkupNode:
    element: etree._Element

    @property
    def kind(self) -> NodeKind:
        return classify(self.element)

    def children_of_kind(self, kind: NodeKind) -> list[MarkupNode]:
        """Direct children of the given kind, in document order."""
        return [
            MarkupNode(child)
            for child in self.element
            if isinstance(child.tag, str) and classify(child) is kind
        ]

    def descendants_of_kind(self, kind: NodeKind) -> Iterator[MarkupNode]:
        """All nodes of the given kind at any depth (self included), in document order."""
        for element in self.element.iter():
            if classify(element) is kind:
                yield MarkupNode(element)

    def text_content(self) -> str:
        """Character data of a text node, or the joined text nodes below any other node."""
        if self.kind is NodeKind.TEXT:
            return self.element.text or ""
        return "".join(
            node.text_content() for node in self.descendants_of_kind(NodeKind.TEXT)
        )


@dataclass(frozen=True)
class SlideText:
    paragraphs: list[str]
    source: TextSource


def parse_markup(raw_xml: str) -> MarkupNode:
    # A fresh parser per call: lxml parser objects must not be shared across threads
    parser = etree.XMLParser(
        resolve_entities=False, no_network=True, remove_comments=True
    )
    try:
        root = etree.fromstring(_XML_DECLARATION.sub("", raw_xml, count=1), parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise MarkupParseError(str(exc)) from exc
    if root is None:
        raise MarkupParseError("empty document")
    return MarkupNode(root)


def extract_text(root: MarkupNode) -> SlideText:
    """Collect the readable paragraphs of a slide.

    Paragraph nodes are the primary source: the text nodes inside each
    paragraph are joined without a separator and blank paragraphs are
    dropped. When no paragraph yields text, every text node in the tree is
    joined with single spaces into one paragraph, which loses paragraph
    breaks but recovers text from unusual nesting.
    """
    paragraphs: list[str] = []
    for paragraph in root.descendants_of_kind(NodeKind.PARAGRAPH):
        text = paragraph.text_content().strip()
        if text:
            paragraphs.append(text)
    if paragraphs:
        return SlideText(paragraphs, TextSource.PARAGRAPHS)

    flat = " ".join(
        node.text_content() for node in root.descendants_of_kind(NodeKind.TEXT)
    ).strip()
    if flat:
        return SlideText([flat], TextSource.FLAT)
    return SlideText([], TextSource.NONE)


def extract_paragraphs(raw_xml: str) -> list[str]:
    return extract_text(parse_markup(raw_xml)).paragraphs

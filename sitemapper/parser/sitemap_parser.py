# File: sitemapper/parser/sitemap_parser.py
"""sitemapper.parser.sitemap_parser: XML deserialisation of sitemap documents and shape detection."""

from __future__ import annotations

import gzip
import zlib
from typing import List, Optional, Union

from lxml import etree

from sitemapper.crawler.models import DocumentShape

__all__ = ("SitemapParseError", "parse_document", "classify_shape", "parse_sitemap")

_GZIP_MAGIC = b"\x1f\x8b"


class SitemapParseError(Exception):
    """Raised when a sitemap body cannot be turned into an XML tree."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.message = message
        self.url = url
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.url:
            return f"Failed to parse sitemap at '{self.url}': {self.message}"
        return f"Sitemap parse error: {self.message}"


def _make_parser() -> etree.XMLParser:
    # strict: malformed documents must fail instead of yielding a partial tree
    return etree.XMLParser(recover=False, resolve_entities=False, no_network=True, remove_comments=True)


def parse_document(body: Union[bytes, str], url: Optional[str] = None) -> etree._Element:
    """Parse a sitemap body into an lxml element tree.

    Gzip-compressed bodies (``.xml.gz`` files served without Content-Encoding)
    are decompressed first.

    Raises:
        SitemapParseError: the body is empty, not valid gzip, or not well-formed XML.
    """
    data = body.encode("utf-8") if isinstance(body, str) else body
    if data.startswith(_GZIP_MAGIC):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise SitemapParseError(f"invalid gzip data: {exc}", url) from exc
    if not data.strip():
        raise SitemapParseError("empty document", url)
    try:
        return etree.fromstring(data, parser=_make_parser())
    except etree.XMLSyntaxError as exc:
        raise SitemapParseError(str(exc), url) from exc


def _local(tag: object) -> str:
    # comments and processing instructions have non-string tags
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def _entry_locs(root: etree._Element, entry_name: str) -> List[str]:
    locs: List[str] = []
    for entry in root:
        if _local(entry.tag) != entry_name:
            continue
        for child in entry:
            if _local(child.tag) == "loc":
                text = (child.text or "").strip()
                if text:
                    locs.append(text)
                break
    return locs


def classify_shape(root: etree._Element) -> DocumentShape:
    """Decide whether *root* is a ``urlset`` or a ``sitemapindex`` and extract its ``loc`` values.

    Namespaces are ignored; only local names count. Entries without a ``loc``
    are skipped. Anything else is ``Unrecognized``.
    """
    name = _local(root.tag)
    if name == "urlset":
        return DocumentShape.url_set(_entry_locs(root, "url"))
    if name == "sitemapindex":
        return DocumentShape.sitemap_index(_entry_locs(root, "sitemap"))
    return DocumentShape.unrecognized()


def parse_sitemap(xml_content: Union[bytes, str]) -> List[str]:
    """Parse a sitemap document and return its ``loc`` values, whatever the shape.

    Args:
        xml_content: body of a sitemap.xml (``urlset`` or ``sitemapindex``).

    Returns:
        Page URLs for a ``urlset``, child sitemap URLs for a ``sitemapindex``,
        an empty list for anything else.

    Example:
    ```python
    from sitemapper.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', 'rb') as f:
        urls = parse_sitemap(f.read())
    print(urls)
    ```
    """
    return list(classify_shape(parse_document(xml_content)).locs)

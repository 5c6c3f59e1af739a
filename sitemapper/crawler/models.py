# sitemapper/crawler/models.py
"""
Data models for the SiteMapper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ShapeKind(str, Enum):
    """Which of the two recognised sitemap documents a body turned out to be."""

    URLSET = "urlset"
    SITEMAPINDEX = "sitemapindex"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class DocumentShape:
    """Classified sitemap document: its kind and the ``loc`` values in document order."""

    kind: ShapeKind
    locs: Tuple[str, ...] = ()

    @classmethod
    def url_set(cls, locs) -> DocumentShape:
        return cls(ShapeKind.URLSET, tuple(locs))

    @classmethod
    def sitemap_index(cls, locs) -> DocumentShape:
        return cls(ShapeKind.SITEMAPINDEX, tuple(locs))

    @classmethod
    def unrecognized(cls) -> DocumentShape:
        return cls(ShapeKind.UNRECOGNIZED)


@dataclass(frozen=True, slots=True, eq=False)
class CrawlRequest:
    """One dispatched sitemap request.

    Compared by identity: every call gets its own token, even for the same URL.
    """

    url: str
    timeout: int


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Result of a single fetch: either a parsed shape or an error, never both."""

    url: str
    shape: Optional[DocumentShape] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.shape is None) == (self.error is None):
            raise ValueError("FetchOutcome needs exactly one of shape or error")

    @classmethod
    def parsed(cls, url: str, shape: DocumentShape) -> FetchOutcome:
        return cls(url, shape=shape)

    @classmethod
    def failed(cls, url: str, reason: str) -> FetchOutcome:
        return cls(url, error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """A sitemap URL that contributed nothing because its fetch failed."""

    url: str
    reason: str


@dataclass(slots=True)
class SitesData:
    """Flattened result of one top-level fetch."""

    url: str
    sites: List[str] = field(default_factory=list)
    errors: List[FetchFailure] = field(default_factory=list)

    def to_dict(self, *, include_errors: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url, "sites": list(self.sites)}
        if include_errors:
            data["errors"] = [{"url": e.url, "reason": e.reason} for e in self.errors]
        return data

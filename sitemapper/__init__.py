# sitemapper/__init__.py
"""
SiteMapper package initializer.
Defines package version and exposes the crawler entry points.
"""
__version__ = "0.1.0"

from sitemapper.config import SiteMapperConfig, load_config
from sitemapper.crawler.crawler import SiteMapper
from sitemapper.crawler.models import SitesData

__all__ = ["__version__", "SiteMapper", "SiteMapperConfig", "SitesData", "load_config"]
